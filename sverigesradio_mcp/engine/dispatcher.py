"""Tool dispatcher: name lookup, argument validation and result wrapping.

``call`` distinguishes three outcomes:

- unknown tool or invalid arguments: raises ``JSONRPCError`` (``-32602``), a
  protocol error the client sees as a JSON-RPC error response;
- handler success: ``{"content": [{"type": "text", "text": <JSON>}]}``;
- handler failure: the same envelope with ``"isError": true``. Tool failures
  never become transport faults.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from ..api.deps import sanitize_error_message
from ..mcp.jsonrpc import INVALID_PARAMS, JSONRPCError
from ..mcp.tool_defs import tool_definition
from ..services.errors import SRAPIError
from .handlers import TOOL_SPECS, HandlerContext, ToolSpec

logger = logging.getLogger(__name__)


def format_validation_error(error: ValidationError) -> str:
    """One ``field: message`` line per violated field."""
    lines = []
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"]) or "arguments"
        lines.append(f"{path}: {issue['msg']}")
    return "Validation failed:\n" + "\n".join(lines)


def text_content(payload: Any, is_error: bool = False) -> dict[str, Any]:
    result: dict[str, Any] = {
        "content": [{"type": "text", "text": json.dumps(payload, indent=2, ensure_ascii=False, default=str)}]
    }
    if is_error:
        result["isError"] = True
    return result


class ToolDispatcher:
    """Looks up tools by name, validates arguments and invokes handlers."""

    def __init__(self, context: HandlerContext, specs: list[ToolSpec] | None = None):
        self.context = context
        self._tools = {spec.name.value: spec for spec in (specs if specs is not None else TOOL_SPECS)}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> list[dict[str, Any]]:
        """Tool definitions for tools/list, schemas generated from the params models."""
        return [tool_definition(spec) for spec in self._tools.values()]

    def validate(self, name: str, arguments: dict[str, Any] | None) -> tuple[ToolSpec, Any]:
        spec = self._tools.get(name)
        if spec is None:
            raise JSONRPCError(INVALID_PARAMS, f"Unknown tool: {name}")
        try:
            params = spec.params_model.model_validate(arguments or {})
        except ValidationError as e:
            raise JSONRPCError(INVALID_PARAMS, format_validation_error(e)) from e
        return spec, params

    async def call(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        spec, params = self.validate(name, arguments)

        try:
            result = await spec.handler(params, self.context)
        except SRAPIError as e:
            logger.warning(f"Tool {name} failed upstream: {e.code} {e.message}")
            return text_content(
                {"error": e.message, "code": e.code.value, "details": e.details},
                is_error=True,
            )
        except Exception as e:
            logger.error(f"Tool {name} raised unexpectedly: {e}", exc_info=True)
            return text_content(
                {"error": sanitize_error_message(e), "code": "INTERNAL_ERROR", "details": {}},
                is_error=True,
            )

        return text_content(result)

