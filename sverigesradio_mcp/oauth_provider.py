"""
OAuth 2.0 Protected Resource Metadata endpoint.

The server accepts one shared bearer token and has no authorization server
of its own. The metadata document (RFC 9728) is what the ``resource_metadata``
parameter of the WWW-Authenticate challenge points at, so clients can learn
how the token is expected to be presented.
"""

import logging

from fastapi import APIRouter, Request

from .api.deps import get_server_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["OAuth Provider"])


# ============ OAUTH METADATA ============


@router.get(
    "/.well-known/oauth-protected-resource",
    summary="OAuth 2.0 Protected Resource Metadata",
    description=(
        "Returns OAuth 2.0 Protected Resource Metadata per RFC 9728. "
        "Advertised by the WWW-Authenticate header on 401 responses."
    ),
)
async def protected_resource_metadata(request: Request) -> dict:
    """OAuth 2.0 Protected Resource Metadata (RFC 9728)."""
    settings = get_server_state(request).settings
    base_url = settings.base_url.rstrip("/")

    return {
        "resource": f"{base_url}/mcp",
        "bearer_methods_supported": ["header"],
        "resource_name": "Sveriges Radio MCP Server",
        "resource_documentation": f"{base_url}/",
        "authorization_required": settings.auth_required,
    }
