"""Per-session message transports for the HTTP server.

``StreamableTransport`` backs one modern (``/mcp``) session: POSTed JSON-RPC
messages are processed and answered inline, while server-initiated messages
are queued for an optional ``GET /mcp`` event stream.

``LegacySession`` backs one ``GET /sse`` connection: every response to a
``POST /messages`` is queued and written to that connection's stream.
"""

import asyncio
import json
import logging
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

if TYPE_CHECKING:
    from ..mcp.methods import MessageProcessor

logger = logging.getLogger(__name__)

# Seconds between keep-alive comments on an idle event stream
KEEPALIVE_INTERVAL = 15.0

_CLOSE = object()


def format_sse(data: Any, event: str | None = None) -> str:
    """Render one Server-Sent Events frame."""
    payload = data if isinstance(data, str) else json.dumps(data)
    lines = [f"event: {event}"] if event else []
    lines.extend(f"data: {line}" for line in payload.splitlines() or [""])
    return "\n".join(lines) + "\n\n"


class _Outbox:
    """Queue of outbound messages terminated by a close marker."""

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    async def put(self, message: Any) -> None:
        if self.closed:
            raise RuntimeError("Transport is closed")
        await self._queue.put(message)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(_CLOSE)

    async def frames(self, keepalive: float = KEEPALIVE_INTERVAL) -> AsyncIterator[str]:
        while True:
            try:
                message = await asyncio.wait_for(self._queue.get(), timeout=keepalive)
            except TimeoutError:
                yield ": keep-alive\n\n"
                continue
            if message is _CLOSE:
                return
            yield format_sse(message, event="message")


class StreamableTransport:
    """Transport owned by exactly one modern session."""

    def __init__(self, session_id: str, processor: "MessageProcessor"):
        self.session_id = session_id
        self._processor = processor
        self._outbox = _Outbox()
        self.stream_open = False

    @property
    def closed(self) -> bool:
        return self._outbox.closed

    async def handle(self, payload: Any) -> Any:
        """Process one JSON-RPC message or batch; ``None`` when nothing to answer."""
        if self.closed:
            raise RuntimeError(f"Transport for session {self.session_id} is closed")
        return await self._processor.process(payload)

    async def send(self, message: dict) -> None:
        await self._outbox.put(message)

    async def stream(self) -> AsyncIterator[str]:
        self.stream_open = True
        try:
            async for frame in self._outbox.frames():
                yield frame
        finally:
            self.stream_open = False

    async def close(self) -> None:
        self._outbox.close()


@dataclass
class LegacySession:
    """One long-lived ``GET /sse`` connection."""

    id: str
    created_at: float = field(default_factory=time.time)
    outbox: _Outbox = field(default_factory=_Outbox)

    @property
    def endpoint(self) -> str:
        return f"/messages?sessionId={self.id}"

    async def send(self, message: Any) -> None:
        await self.outbox.put(message)

    async def stream(self) -> AsyncIterator[str]:
        yield format_sse(self.endpoint, event="endpoint")
        async for frame in self.outbox.frames():
            yield frame


class LegacySessionRegistry:
    """Live legacy SSE connections keyed by a server-minted id. No TTL."""

    def __init__(self):
        self._sessions: dict[str, LegacySession] = {}

    def open(self) -> LegacySession:
        session = LegacySession(id=str(uuid4()))
        self._sessions[session.id] = session
        logger.info(f"Legacy SSE session opened: {session.id}")
        return session

    def get(self, session_id: str) -> LegacySession | None:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.outbox.close()
        logger.info(f"Legacy SSE session closed: {session_id}")
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
