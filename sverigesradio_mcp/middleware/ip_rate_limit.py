"""IP-based rate limiting middleware.

Provides the per-client-IP request budget in front of every endpoint.
"""

import json
import logging

from ..mcp.jsonrpc import RATE_LIMITED, jsonrpc_error
from ..services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# Monitoring and documentation stay reachable regardless of budget
EXEMPT_PATHS = ("/health", "/")


def client_ip_from_scope(scope) -> str | None:
    headers = dict(scope.get("headers", []))
    forwarded_for = headers.get(b"x-forwarded-for")
    if forwarded_for:
        # First IP in X-Forwarded-For is the original client
        return forwarded_for.decode().split(",")[0].strip()
    if scope.get("client"):
        return scope["client"][0]
    return None


class IPRateLimitMiddleware:
    """
    Fixed-window rate limiting by client IP address.

    Applies to all HTTP requests before reaching endpoint handlers.
    Uses X-Forwarded-For header (behind reverse proxy) or direct client address.
    Skips the health check, the documentation root and CORS preflights.

    Allowed responses carry X-RateLimit-Limit/Remaining/Reset headers; rejected
    requests get 429 with a JSON-RPC error envelope and Retry-After.
    """

    def __init__(self, app, limiter: RateLimiter):
        self.app = app
        self.limiter = limiter

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        if path in EXEMPT_PATHS or scope.get("method") == "OPTIONS":
            await self.app(scope, receive, send)
            return

        client_ip = client_ip_from_scope(scope) or "unknown"

        if self.limiter.is_limited(client_ip):
            retry_after = self.limiter.retry_after(client_ip)
            logger.warning(f"Rate limit exceeded for {client_ip} on {path}")
            response_body = json.dumps(
                jsonrpc_error(
                    None,
                    RATE_LIMITED,
                    f"Rate limit exceeded: {self.limiter.max_requests} requests per window. "
                    f"Retry after {retry_after} seconds",
                )
            ).encode()
            headers = [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(response_body)).encode()),
                (b"retry-after", str(retry_after).encode()),
            ]
            headers.extend(_encode_headers(self.limiter.headers_for(client_ip)))
            await send(
                {
                    "type": "http.response.start",
                    "status": 429,
                    "headers": headers,
                }
            )
            await send(
                {
                    "type": "http.response.body",
                    "body": response_body,
                }
            )
            return

        rate_headers = _encode_headers(self.limiter.headers_for(client_ip))

        async def send_with_rate_headers(message):
            if message["type"] == "http.response.start":
                message = {**message, "headers": [*message.get("headers", []), *rate_headers]}
            await send(message)

        await self.app(scope, receive, send_with_rate_headers)


def _encode_headers(headers: dict[str, str]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode(), value.encode()) for name, value in headers.items()]
