"""Base infrastructure for tool handlers.

This module provides the common types and utilities used by all handler modules.
Each handler receives its validated params model and a HandlerContext, and
returns the reshaped result as a plain dict.
"""

from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ...models import ToolName, ToolParams
from ...services.sr_client import SRClient, SRResponse, is_raw_response


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class HandlerContext:
    """Context object passed to all handlers."""

    client: SRClient

    # Injectable for deterministic timestamps in tests
    now: Callable[[], datetime] = field(default=utc_now)

    def timestamp(self) -> str:
        return self.now().isoformat().replace("+00:00", "Z")

    def today(self) -> str:
        return self.now().date().isoformat()


# Type alias for handler functions
HandlerFunc = Callable[
    [Any, HandlerContext],
    Coroutine[Any, Any, dict[str, Any]],
]


@dataclass(frozen=True)
class ToolSpec:
    """A tool as exposed through tools/list and tools/call."""

    name: ToolName
    description: str
    params_model: type[ToolParams]
    handler: HandlerFunc


def is_raw(response: SRResponse) -> bool:
    """True for XML passthrough bodies, which handlers return unshaped."""
    return is_raw_response(response)


def pagination_of(response: SRResponse) -> dict[str, Any] | None:
    return response.get("pagination")
