"""Typed errors raised by the Sveriges Radio API client.

Every upstream failure is classified into one of the codes below so that
tools (and the agent calling them) can react to the kind of failure instead
of parsing messages. Each error carries a ``suggestion`` in its details.
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Machine-readable upstream error codes."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_PARAMS = "INVALID_PARAMS"
    API_ERROR = "API_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    NETWORK_ERROR = "NETWORK_ERROR"


class SRAPIError(Exception):
    """Base class for all upstream API errors."""

    code: ErrorCode = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.http_status = http_status
        self.timestamp = datetime.now(UTC).isoformat()

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
                "httpStatus": self.http_status,
                "timestamp": self.timestamp,
            }
        }


class NotFoundError(SRAPIError):
    code = ErrorCode.NOT_FOUND


class InvalidParamsError(SRAPIError):
    code = ErrorCode.INVALID_PARAMS


class UpstreamRateLimitError(SRAPIError):
    code = ErrorCode.RATE_LIMIT


class UpstreamServerError(SRAPIError):
    code = ErrorCode.API_ERROR


class NetworkError(SRAPIError):
    code = ErrorCode.NETWORK_ERROR


def classify_status(
    status: int,
    url: str,
    body: str = "",
    retry_after: str | None = None,
) -> SRAPIError:
    """Map a non-2xx upstream response to a typed error."""
    if status == 404:
        return NotFoundError(
            "The requested resource was not found. This may indicate an invalid ID "
            "or unavailable data.",
            {
                "url": url,
                "suggestion": "Verify that the ID exists and is accessible. For playlists, "
                "check if the channel/program has music metadata.",
            },
            status,
        )
    if status == 400:
        return InvalidParamsError(
            "Invalid request parameters. Check parameter format and values.",
            {
                "url": url,
                "suggestion": "Ensure date/time parameters use ISO 8601 format "
                "(YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS)",
            },
            status,
        )
    if status == 429:
        return UpstreamRateLimitError(
            "Rate limit exceeded. Please wait before making more requests.",
            {
                "retryAfter": retry_after,
                "suggestion": "Implement exponential backoff or respect the Retry-After header",
            },
            status,
        )
    if status >= 500:
        return UpstreamServerError(
            "Sveriges Radio API server error. The service may be temporarily unavailable.",
            {
                "message": body[:500],
                "suggestion": "Retry after a short delay. If the problem persists, check SR API status.",
            },
            status,
        )
    return SRAPIError(
        f"Unexpected response status {status} from Sveriges Radio API",
        {"url": url, "message": body[:500]},
        status,
    )


def network_error(exc: Exception, timed_out: bool = False) -> NetworkError:
    """Wrap a transport-level failure (DNS, refused connection, timeout)."""
    if timed_out:
        return NetworkError(
            "Request timeout: Sveriges Radio API did not respond in time",
            {"suggestion": "Try again or increase UPSTREAM_TIMEOUT_SECONDS"},
        )
    return NetworkError(
        "Network error: Unable to connect to Sveriges Radio API",
        {
            "networkError": type(exc).__name__,
            "suggestion": "Check internet connection and DNS settings",
        },
    )
