"""Session registry for the streamable HTTP transport.

Sessions move through ``absent -> pending -> active -> closed``; every move is
checked against ``ALLOWED_TRANSITIONS``. ``closed`` is terminal and a closed
id is forgotten, so a later request carrying it is treated as unknown.

Unknown ids are handled leniently: a syntactically valid (UUID) id that the
registry does not know, e.g. after a server restart or idle expiry, is
promoted to a fresh session under that id. Malformed ids are rejected.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID, uuid4

from .transports import StreamableTransport

logger = logging.getLogger(__name__)


class SessionState(StrEnum):
    ABSENT = "absent"
    PENDING = "pending"
    ACTIVE = "active"
    CLOSED = "closed"


ALLOWED_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.ABSENT: frozenset({SessionState.PENDING}),
    SessionState.PENDING: frozenset({SessionState.ACTIVE, SessionState.CLOSED}),
    SessionState.ACTIVE: frozenset({SessionState.ACTIVE, SessionState.CLOSED}),
    SessionState.CLOSED: frozenset(),
}


class SessionError(Exception):
    """Session lookup failure, reported as JSON-RPC ``-32003``."""

    def __init__(self, message: str, http_status: int = 400):
        super().__init__(message)
        self.message = message
        self.http_status = http_status


class IllegalTransitionError(RuntimeError):
    def __init__(self, session_id: str, current: SessionState, target: SessionState):
        super().__init__(f"Session {session_id}: illegal transition {current} -> {target}")
        self.current = current
        self.target = target


@dataclass
class Session:
    id: str
    transport: StreamableTransport
    created_at: float
    last_activity: float
    request_count: int = 0
    state: SessionState = field(default=SessionState.ABSENT)

    def transition(self, target: SessionState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise IllegalTransitionError(self.id, self.state, target)
        self.state = target


def is_valid_session_id(session_id: str) -> bool:
    try:
        UUID(session_id)
    except ValueError:
        return False
    return True


class SessionRegistry:
    """Maps session ids to their transport and bookkeeping."""

    def __init__(
        self,
        transport_factory: Callable[[str], StreamableTransport],
        ttl_seconds: float = 30 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self._transport_factory = transport_factory
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def create(self, session_id: str | None = None) -> Session:
        """Register a new pending session (fresh UUID4 unless ``session_id`` given)."""
        session_id = session_id or str(uuid4())
        if session_id in self._sessions:
            raise SessionError(f"Session already exists: {session_id}", http_status=409)

        now = self._clock()
        session = Session(
            id=session_id,
            transport=self._transport_factory(session_id),
            created_at=now,
            last_activity=now,
        )
        session.transition(SessionState.PENDING)
        self._sessions[session_id] = session
        logger.info(f"Session created: {session_id}")
        return session

    def resolve(self, session_id: str | None) -> Session:
        """Find the session for a non-initialize request.

        Raises:
            SessionError: header missing or malformed.
        """
        if not session_id:
            raise SessionError("Bad Request: Mcp-Session-Id header is required", http_status=400)

        session = self._sessions.get(session_id)
        if session is not None:
            return session

        if not is_valid_session_id(session_id):
            raise SessionError(f"Bad Request: Malformed session ID: {session_id}", http_status=400)

        logger.warning(f"Unknown session {session_id}, recreating it (lenient mode)")
        return self.create(session_id)

    def activate(self, session: Session) -> bool:
        """Mark the handshake as acknowledged.

        Returns False when the session was closed while the caller awaited.
        """
        if self._sessions.get(session.id) is not session:
            return False
        if session.state == SessionState.PENDING:
            session.transition(SessionState.ACTIVE)
        return True

    def touch(self, session: Session) -> None:
        session.last_activity = self._clock()
        session.request_count += 1
        if session.state == SessionState.ACTIVE:
            session.transition(SessionState.ACTIVE)

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    async def close(self, session_id: str, reason: str = "closed") -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        session.transition(SessionState.CLOSED)
        try:
            await session.transport.close()
        except Exception as e:
            logger.error(f"Error closing transport for session {session_id}: {e}")
        logger.info(
            f"Session {session_id} closed ({reason}) after {session.request_count} requests"
        )
        return True

    async def sweep(self) -> int:
        """Close every session idle for longer than the TTL."""
        now = self._clock()
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.last_activity > self.ttl_seconds
        ]
        for session_id in expired:
            await self.close(session_id, reason="idle timeout")
        if expired:
            logger.info(f"Swept {len(expired)} idle session(s)")
        return len(expired)

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id, reason="shutdown")

    def counts(self) -> dict[str, int]:
        states = [session.state for session in self._sessions.values()]
        return {
            "total": len(states),
            "pending": states.count(SessionState.PENDING),
            "active": states.count(SessionState.ACTIVE),
        }

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
