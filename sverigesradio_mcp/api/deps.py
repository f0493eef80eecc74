"""FastAPI dependency injection functions.

This module contains shared dependencies for API endpoints:
- Server state lookup
- Client IP extraction
- Bearer token authentication
- Error sanitization
"""

import logging
import secrets
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Header, HTTPException
from fastapi import Request as FastAPIRequest

from ..mcp.jsonrpc import INVALID_TOKEN, MISSING_TOKEN

if TYPE_CHECKING:
    from ..server import ServerState

logger = logging.getLogger(__name__)


class MCPHTTPException(HTTPException):
    """HTTP error that is rendered as a JSON-RPC error envelope."""

    def __init__(
        self,
        status_code: int,
        code: int,
        message: str,
        headers: dict[str, str] | None = None,
        request_id: Any = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code = code
        self.request_id = request_id


# ============ ERROR SANITIZATION ============


def sanitize_error_message(error: Exception) -> str:
    """
    Sanitize error messages to prevent information disclosure.

    Returns a generic message for unexpected errors while preserving
    useful information for known error types.
    """
    error_str = str(error)

    # Known safe error patterns that can be returned to client
    safe_patterns = [
        "Unknown tool",
        "Validation failed",
        "Rate limit exceeded",
        "Session not found",
        "Invalid parameter",
        "Sveriges Radio API",
    ]

    for pattern in safe_patterns:
        if pattern.lower() in error_str.lower():
            return error_str

    # Log the actual error for debugging
    logger.error(f"Tool execution error: {error}", exc_info=True)

    # Return generic message for unknown errors
    return "An error occurred processing your request. Please try again."


# ============ STATE & HEADER EXTRACTORS ============


def get_server_state(request: FastAPIRequest) -> "ServerState":
    return request.app.state.server


def get_client_ip(request: FastAPIRequest) -> str | None:
    """Extract client IP from X-Forwarded-For header or direct connection.

    X-Forwarded-For is trusted as sent; behind an untrusted proxy it can be spoofed.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def auth_challenge(base_url: str) -> str:
    return (
        'Bearer realm="MCP Server", '
        f'resource_metadata="{base_url.rstrip("/")}/.well-known/oauth-protected-resource"'
    )


# ============ AUTHENTICATION ============


async def require_bearer_token(
    request: FastAPIRequest,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Check ``Authorization: Bearer <token>`` when MCP_AUTH_TOKEN is configured.

    Raises:
        MCPHTTPException: 401 (-32000) when missing, 403 (-32001) when wrong.
    """
    state = get_server_state(request)
    expected = state.settings.mcp_auth_token
    if not expected:
        return

    if not authorization or not authorization.startswith("Bearer "):
        raise MCPHTTPException(
            status_code=401,
            code=MISSING_TOKEN,
            message="Unauthorized: Missing or invalid Authorization header",
            headers={"WWW-Authenticate": auth_challenge(state.settings.base_url)},
        )

    token = authorization[7:].strip()
    if not secrets.compare_digest(token.encode(), expected.encode()):
        logger.warning("Rejected request with invalid bearer token")
        raise MCPHTTPException(
            status_code=403,
            code=INVALID_TOKEN,
            message="Forbidden: Invalid token",
        )
