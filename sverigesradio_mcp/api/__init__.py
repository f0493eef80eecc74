"""API utilities and dependencies.

This package contains shared API utilities:
- deps: FastAPI dependency injection functions
"""

from .deps import (
    MCPHTTPException,
    get_client_ip,
    get_server_state,
    require_bearer_token,
    sanitize_error_message,
)

__all__ = [
    "MCPHTTPException",
    "get_client_ip",
    "get_server_state",
    "require_bearer_token",
    "sanitize_error_message",
]
