"""MCP (Model Context Protocol) protocol module.

This module contains the transport-independent protocol pieces:
- JSON-RPC 2.0 helpers and error codes
- Tool definitions for tools/list
- Static resources and prompt templates
- The method table (import from .methods directly)

The HTTP transport router remains in mcp_transport.py.
"""

from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    INVALID_TOKEN,
    METHOD_NOT_FOUND,
    MISSING_TOKEN,
    PARSE_ERROR,
    RATE_LIMITED,
    SESSION_ERROR,
    JSONRPCError,
    jsonrpc_error,
    jsonrpc_response,
)
from .tool_defs import TOOL_DEFINITIONS

# Note: MessageProcessor pulls in the tool dispatcher and is not imported at
# module level. Import directly when needed: from .methods import MessageProcessor

__all__ = [
    # Tool definitions
    "TOOL_DEFINITIONS",
    # JSON-RPC helpers
    "JSONRPCError",
    "jsonrpc_response",
    "jsonrpc_error",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "MISSING_TOKEN",
    "INVALID_TOKEN",
    "RATE_LIMITED",
    "SESSION_ERROR",
]
