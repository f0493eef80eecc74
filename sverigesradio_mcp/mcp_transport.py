"""MCP HTTP transports.

Two transports share the same JSON-RPC method table:

Streamable HTTP (protocol 2025-03-26), session bound by ``Mcp-Session-Id``:
    POST   /mcp   JSON-RPC message or batch; response inline
    GET    /mcp   event stream for server-initiated messages
    DELETE /mcp   end the session

Legacy HTTP+SSE (protocol 2024-11-05):
    GET    /sse                  event stream; first event names the POST endpoint
    POST   /messages?sessionId=  JSON-RPC in, responses out on the stream, 202 here

Every route requires the bearer token when MCP_AUTH_TOKEN is set.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from .api.deps import MCPHTTPException, get_server_state, require_bearer_token
from .mcp.jsonrpc import INVALID_REQUEST, PARSE_ERROR, SESSION_ERROR
from .mcp.methods import is_initialize_request
from .services.session_registry import Session, SessionError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["MCP Transport"], dependencies=[Depends(require_bearer_token)])

SESSION_HEADER = "Mcp-Session-Id"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


async def _read_json(request: Request) -> Any:
    """Decode the request body as JSON.

    Raises:
        MCPHTTPException: 413 when over MAX_JSON_PAYLOAD_SIZE, 400 (-32700) when not JSON.
    """
    max_size = get_server_state(request).settings.max_json_payload_size
    too_large = MCPHTTPException(
        status_code=413,
        code=INVALID_REQUEST,
        message=f"JSON payload too large. Maximum size: {max_size} bytes",
    )
    # Declared length is checked before the body is buffered
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > max_size:
        raise too_large

    body = await request.body()
    if len(body) > max_size:
        raise too_large
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MCPHTTPException(status_code=400, code=PARSE_ERROR, message="Parse error: invalid JSON") from e


def _first_request_id(payload: Any) -> Any:
    if isinstance(payload, dict):
        return payload.get("id")
    return None


def _resolve_session(request: Request, payload: Any = None) -> Session:
    sessions = get_server_state(request).sessions
    try:
        return sessions.resolve(request.headers.get(SESSION_HEADER))
    except SessionError as e:
        raise MCPHTTPException(
            status_code=e.http_status,
            code=SESSION_ERROR,
            message=e.message,
            request_id=_first_request_id(payload),
        ) from e


def _reply(body: Any, session_id: str) -> Response:
    headers = {SESSION_HEADER: session_id}
    if body is None:
        return Response(status_code=202, headers=headers)
    return JSONResponse(content=body, headers=headers)


# ============ STREAMABLE HTTP ============


@router.post("/mcp")
async def mcp_post(request: Request) -> Response:
    """Handle one JSON-RPC message or batch on a streamable HTTP session.

    ``initialize`` always mints a new session; the id is returned in the
    ``Mcp-Session-Id`` header and must accompany every later request.
    """
    state = get_server_state(request)
    payload = await _read_json(request)

    if is_initialize_request(payload):
        session = state.sessions.create()
        state.sessions.touch(session)
        response = await session.transport.handle(payload)
        if not state.sessions.activate(session):
            logger.warning(f"Session {session.id} closed during initialize")
        return _reply(response, session.id)

    session = _resolve_session(request, payload)
    # Bookkeeping before the await; the sweeper may run while the handler does
    state.sessions.touch(session)
    response = await session.transport.handle(payload)
    state.sessions.activate(session)

    return _reply(response, session.id)


@router.get("/mcp")
async def mcp_stream(request: Request) -> StreamingResponse:
    """Open the server-to-client event stream for a session.

    A request without ``Mcp-Session-Id`` gets a new session.
    """
    state = get_server_state(request)
    if request.headers.get(SESSION_HEADER):
        session = _resolve_session(request)
    else:
        session = state.sessions.create()
    state.sessions.touch(session)
    state.sessions.activate(session)

    logger.info(f"Event stream opened for session {session.id}")
    return StreamingResponse(
        session.transport.stream(),
        media_type="text/event-stream",
        headers={**SSE_HEADERS, SESSION_HEADER: session.id},
    )


@router.delete("/mcp")
async def mcp_delete(request: Request) -> Response:
    """Terminate a session; 404 when the id is unknown."""
    state = get_server_state(request)
    session_id = request.headers.get(SESSION_HEADER)
    if not session_id:
        raise MCPHTTPException(
            status_code=400,
            code=SESSION_ERROR,
            message=f"Bad Request: {SESSION_HEADER} header is required",
        )

    if not await state.sessions.close(session_id, reason="client request"):
        raise MCPHTTPException(
            status_code=404,
            code=SESSION_ERROR,
            message=f"Session not found: {session_id}",
        )
    return Response(status_code=204)


# ============ LEGACY HTTP+SSE ============


@router.get("/sse")
async def legacy_sse(request: Request) -> StreamingResponse:
    """Open a legacy SSE connection.

    The first event is ``endpoint`` with the URL to POST messages to. The
    session lives exactly as long as this connection.
    """
    registry = get_server_state(request).legacy_sessions
    session = registry.open()

    async def event_stream():
        try:
            async for frame in session.stream():
                yield frame
        finally:
            registry.close(session.id)

    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/messages")
async def legacy_messages(request: Request, sessionId: str | None = None) -> Response:
    """Accept a JSON-RPC message for a legacy SSE session.

    Responses are written to the session's event stream; this request only
    acknowledges receipt with 202.
    """
    state = get_server_state(request)
    if not sessionId:
        raise MCPHTTPException(
            status_code=400,
            code=SESSION_ERROR,
            message="Bad Request: sessionId query parameter is required",
        )

    session = state.legacy_sessions.get(sessionId)
    if session is None:
        raise MCPHTTPException(
            status_code=404,
            code=SESSION_ERROR,
            message=f"Session not found: {sessionId}",
        )

    payload = await _read_json(request)
    response = await state.legacy_processor.process(payload)
    if response is not None:
        try:
            await session.send(response)
        except RuntimeError:
            # Connection dropped while the message was being processed
            logger.warning(f"Legacy session {sessionId} closed before response could be sent")

    return Response(content="Accepted", status_code=202, media_type="text/plain")
