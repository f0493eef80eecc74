"""Security headers and response guard middleware.

Adds security headers to all HTTP responses and turns unhandled errors into
JSON-RPC error envelopes, using the pure ASGI pattern.
"""

import json
import logging
from uuid import uuid4

from ..config import settings
from ..mcp.jsonrpc import INTERNAL_ERROR, jsonrpc_error

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware:
    """
    Add security headers to all responses and guard against unhandled errors.

    Uses pure ASGI middleware pattern instead of BaseHTTPMiddleware
    to avoid Content-Length mismatch issues with streaming responses.

    Headers added:
        - X-Request-Id: Unique request identifier for tracing
        - X-Content-Type-Options: nosniff
        - X-Frame-Options: DENY
        - X-XSS-Protection: 1; mode=block
        - Strict-Transport-Security: (production only)

    An exception escaping the application becomes a 500 JSON-RPC internal
    error when no response has started yet. Once headers are sent (an open
    event stream, say) the error is only logged.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # Generate request ID for tracing
        request_id = str(uuid4())
        response_started = False

        async def send_with_headers(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = list(message.get("headers", []))
                # Add security headers
                headers.append((b"x-request-id", request_id.encode()))
                headers.append((b"x-content-type-options", b"nosniff"))
                headers.append((b"x-frame-options", b"DENY"))
                headers.append((b"x-xss-protection", b"1; mode=block"))

                # Add HSTS in production (non-debug mode)
                if not settings.debug:
                    headers.append(
                        (b"strict-transport-security", b"max-age=31536000; includeSubDomains")
                    )

                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_headers)
        except Exception as e:
            logger.error(
                f"Unhandled exception on {scope.get('method')} {scope.get('path')} "
                f"(request {request_id}): {e}",
                exc_info=True,
            )
            if response_started:
                return

            response_body = json.dumps(jsonrpc_error(None, INTERNAL_ERROR, "Internal server error")).encode()
            await send_with_headers(
                {
                    "type": "http.response.start",
                    "status": 500,
                    "headers": [
                        (b"content-type", b"application/json"),
                        (b"content-length", str(len(response_body)).encode()),
                    ],
                }
            )
            await send_with_headers(
                {
                    "type": "http.response.body",
                    "body": response_body,
                }
            )
