"""Per-client-IP fixed-window rate limiter.

Each client IP gets a counter and a window end time. The first request after
the window ends starts a new window with a count of 1. Rejected requests
still count, so a client hammering the server stays limited until the window
rolls over.

State is in-process only; a multi-worker deployment needs an external store.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float


class RateLimiter:
    """Fixed-window counter keyed by client IP."""

    def __init__(
        self,
        max_requests: int = 60,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: dict[str, RateLimitEntry] = {}

    def is_limited(self, ip: str) -> bool:
        """Count one request for ``ip`` and report whether it exceeds the limit.

        Call exactly once per request.
        """
        now = self._clock()
        entry = self._entries.get(ip)

        if entry is None or now > entry.reset_time:
            self._entries[ip] = RateLimitEntry(count=1, reset_time=now + self.window_seconds)
            return False

        entry.count += 1
        return entry.count > self.max_requests

    def remaining(self, ip: str) -> int:
        entry = self._entries.get(ip)
        if entry is None or self._clock() > entry.reset_time:
            return self.max_requests
        return max(0, self.max_requests - entry.count)

    def retry_after(self, ip: str) -> int:
        """Whole seconds until the current window for ``ip`` resets."""
        entry = self._entries.get(ip)
        if entry is None:
            return 0
        return max(0, math.ceil(entry.reset_time - self._clock()))

    def headers_for(self, ip: str) -> dict[str, str]:
        entry = self._entries.get(ip)
        reset_time = entry.reset_time if entry else self._clock() + self.window_seconds
        return {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(self.remaining(ip)),
            "X-RateLimit-Reset": str(math.ceil(reset_time)),
        }

    def sweep(self) -> int:
        """Drop entries whose window ended more than one window ago."""
        cutoff = self._clock() - self.window_seconds
        stale = [ip for ip, entry in self._entries.items() if entry.reset_time < cutoff]
        for ip in stale:
            del self._entries[ip]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)
