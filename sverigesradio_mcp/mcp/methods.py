"""JSON-RPC method table and message processing.

``MessageProcessor.process`` accepts one decoded JSON-RPC message or a batch
and returns what should be sent back: a response dict, a list of responses,
or ``None`` when the input held only notifications.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from .. import __version__
from ..engine.dispatcher import ToolDispatcher
from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JSONRPCError,
    jsonrpc_error,
    jsonrpc_response,
)
from .prompts import get_prompt, list_prompts
from .resources import list_resources, read_resource

logger = logging.getLogger(__name__)

SERVER_NAME = "sverigesradio-mcp"

# Streamable HTTP (/mcp) and stdio
MODERN_PROTOCOL_VERSION = "2025-03-26"
# Legacy HTTP+SSE (/sse + /messages)
LEGACY_PROTOCOL_VERSION = "2024-11-05"

MethodHandler = Callable[[dict[str, Any]], Awaitable[Any]]


def _messages(payload: Any) -> list[Any]:
    return payload if isinstance(payload, list) else [payload]


def is_initialize_request(payload: Any) -> bool:
    return any(isinstance(m, dict) and m.get("method") == "initialize" for m in _messages(payload))


class MessageProcessor:
    """Routes JSON-RPC messages to method handlers by name."""

    def __init__(
        self,
        dispatcher: ToolDispatcher,
        protocol_version: str = MODERN_PROTOCOL_VERSION,
    ):
        self.dispatcher = dispatcher
        self.protocol_version = protocol_version
        self._methods: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "notifications/initialized": self._noop,
            "notifications/cancelled": self._noop,
            "ping": self._ping,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "resources/list": self._resources_list,
            "resources/read": self._resources_read,
            "prompts/list": self._prompts_list,
            "prompts/get": self._prompts_get,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._methods)

    async def process(self, payload: Any) -> dict | list | None:
        if isinstance(payload, list):
            if not payload:
                return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request: empty batch")
            responses = []
            for message in payload:
                response = await self.process_message(message)
                if response is not None:
                    responses.append(response)
            return responses or None
        return await self.process_message(payload)

    async def process_message(self, message: Any) -> dict | None:
        if not isinstance(message, dict):
            return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request: message must be an object")

        id = message.get("id")
        method = message.get("method")
        is_notification = "id" not in message

        if "method" not in message and ("result" in message or "error" in message):
            # A response from the client; nothing to answer
            return None
        if message.get("jsonrpc") != "2.0" or not isinstance(method, str):
            return jsonrpc_error(id, INVALID_REQUEST, "Invalid Request: expected JSON-RPC 2.0 message")

        handler = self._methods.get(method)
        if handler is None:
            if is_notification:
                return None
            return jsonrpc_error(id, METHOD_NOT_FOUND, f"Method not found: {method}")

        params = message.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return None if is_notification else jsonrpc_error(id, INVALID_PARAMS, "Invalid params: expected an object")

        try:
            result = await handler(params)
        except JSONRPCError as e:
            return None if is_notification else e.to_response(id)
        except Exception as e:
            logger.error(f"Unhandled error in {method}: {e}", exc_info=True)
            return None if is_notification else jsonrpc_error(id, INTERNAL_ERROR, "Internal error")

        return None if is_notification else jsonrpc_response(id, result)

    # ============ METHOD HANDLERS ============

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client = params.get("clientInfo") or {}
        logger.info(f"Initialize from {client.get('name', 'unknown client')} {client.get('version', '')}".rstrip())
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": {"tools": {}, "resources": {}, "prompts": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def _noop(self, params: dict[str, Any]) -> None:
        return None

    async def _ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": self.dispatcher.list_tools()}

    async def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            raise JSONRPCError(INVALID_PARAMS, "Invalid params: tool name is required")
        return await self.dispatcher.call(name, params.get("arguments"))

    async def _resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"resources": list_resources()}

    async def _resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        uri = params.get("uri")
        if not isinstance(uri, str):
            raise JSONRPCError(INVALID_PARAMS, "Invalid params: uri is required")
        return read_resource(uri)

    async def _prompts_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"prompts": list_prompts()}

    async def _prompts_get(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            raise JSONRPCError(INVALID_PARAMS, "Invalid params: prompt name is required")
        return get_prompt(name, params.get("arguments"))
