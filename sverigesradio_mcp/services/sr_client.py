"""Caching HTTP client for the Sveriges Radio open API.

Responses are kept in an in-memory map keyed by the exact request URL. Fresh
entries with an ETag are revalidated with ``If-None-Match``; a 304 refreshes
the expiry and returns the cached payload. When the upstream fails (network
error, timeout or an error status) a cached payload for the same URL is
returned regardless of freshness. Only when no entry exists does the error
reach the caller.

Cache keys are NOT canonicalized: the same parameters in a different order
produce a different URL and therefore a different entry.
"""

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from .. import __version__
from .errors import SRAPIError, classify_status, network_error

logger = logging.getLogger(__name__)

SR_API_BASE = "https://api.sr.se/api/v2"

DEFAULT_PARAMS: dict[str, Any] = {
    "format": "json",
    "audioquality": "hi",
    "pagination": True,
    "size": 10,
    "page": 1,
    "liveaudiotemplateid": 2,  # MP3 stream
    "ondemandaudiotemplateid": 1,
    "indent": False,
}

DEFAULT_CACHE_TTL_SECONDS = 5 * 60

_MAX_AGE_RE = re.compile(r"max-age=(\d+)")

# Decoded upstream JSON body
SRResponse = dict[str, Any]


@dataclass
class CacheEntry:
    """One cached upstream response."""

    key: str
    payload: SRResponse
    validator: str | None
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_raw_response(response: SRResponse) -> bool:
    """True when the payload is a non-JSON (XML) body wrapped by the client."""
    return response.get("format") == "xml" and "content" in response


class SRClient:
    """Upstream client with ETag revalidation and stale-on-error fallback."""

    def __init__(
        self,
        base_url: str = SR_API_BASE,
        timeout: float = 10.0,
        default_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.base_url = base_url.rstrip("/")
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}
        self._http = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/json",
                "User-Agent": f"sverigesradio-mcp/{__version__}",
            },
        )

    # ============ URL & EXPIRY ============

    def build_url(self, endpoint: str, params: dict[str, Any] | None = None) -> str:
        """Merge default and caller params (caller wins) into a request URL.

        ``None`` caller values are skipped, so they never erase a default.
        """
        given = {key: value for key, value in (params or {}).items() if value is not None}
        merged = {**DEFAULT_PARAMS, **given}
        query = [(key, _encode_value(value)) for key, value in merged.items()]
        url = httpx.URL(f"{self.base_url}/{endpoint.lstrip('/')}")
        return str(url.copy_with(params=query))

    def _expiry_from(self, headers: httpx.Headers) -> float:
        cache_control = headers.get("cache-control")
        if cache_control:
            match = _MAX_AGE_RE.search(cache_control)
            if match:
                return self._clock() + int(match.group(1))
        return self._clock() + self.default_ttl_seconds

    # ============ FETCH ============

    async def fetch(self, endpoint: str, params: dict[str, Any] | None = None) -> SRResponse:
        """Fetch an endpoint, serving from or revalidating the cache.

        Raises:
            SRAPIError: when the request fails and nothing is cached for the URL.
        """
        url = self.build_url(endpoint, params)
        cached = self._cache.get(url)

        try:
            return await self._fetch_live(url, cached)
        except SRAPIError as e:
            if cached is not None:
                logger.warning(f"Upstream request failed ({e.code}), returning cached data for {url}")
                return cached.payload
            raise

    async def _fetch_live(self, url: str, cached: CacheEntry | None) -> SRResponse:
        headers = {}
        if cached is not None and not cached.is_expired(self._clock()) and cached.validator:
            headers["If-None-Match"] = cached.validator

        try:
            response = await self._http.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise network_error(e, timed_out=True) from e
        except httpx.RequestError as e:
            raise network_error(e) from e

        if response.status_code == 304 and cached is not None:
            # Re-read the entry: another request may have replaced it while we awaited
            entry = self._cache.get(url, cached)
            entry.expires_at = self._expiry_from(response.headers)
            self._cache[url] = entry
            return entry.payload

        if not response.is_success:
            raise classify_status(
                response.status_code,
                url,
                body=response.text,
                retry_after=response.headers.get("retry-after"),
            )

        payload = self._decode(response, url)
        self._cache[url] = CacheEntry(
            key=url,
            payload=payload,
            validator=response.headers.get("etag"),
            expires_at=self._expiry_from(response.headers),
        )
        return payload

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> SRResponse:
        content_type = response.headers.get("content-type", "")
        if "xml" in content_type:
            return {"format": "xml", "content": response.text}
        try:
            data = response.json()
        except ValueError as e:
            raise SRAPIError(
                "Sveriges Radio API returned a body that is not valid JSON",
                {"url": url, "suggestion": "Retry the request or use format=xml"},
                response.status_code,
            ) from e
        if not isinstance(data, dict):
            return {"data": data}
        return data

    async def fetch_paginated(self, endpoint: str, params: dict[str, Any] | None = None) -> SRResponse:
        return await self.fetch(endpoint, {**(params or {}), "pagination": True})

    # ============ ADMIN ============

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> dict[str, int]:
        now = self._clock()
        expired = sum(1 for entry in self._cache.values() if entry.is_expired(now))
        return {
            "total": len(self._cache),
            "valid": len(self._cache) - expired,
            "expired": expired,
        }

    def get_entry(self, url: str) -> CacheEntry | None:
        return self._cache.get(url)

    async def aclose(self) -> None:
        await self._http.aclose()
