import httpx
import pytest

from sverigesradio_mcp.services.errors import (
    ErrorCode,
    InvalidParamsError,
    NetworkError,
    NotFoundError,
    SRAPIError,
    UpstreamRateLimitError,
    UpstreamServerError,
)
from sverigesradio_mcp.services.sr_client import DEFAULT_CACHE_TTL_SECONDS

CHANNELS = {"channels": [{"id": 132, "name": "P1"}]}


def test_build_url_merges_defaults_and_skips_none(sr_client):
    url = httpx.URL(sr_client.build_url("channels", {"size": 5, "channelid": None, "pagination": False}))

    assert url.path == "/api/v2/channels"
    assert url.params["size"] == "5"
    assert url.params["format"] == "json"
    assert url.params["audioquality"] == "hi"
    assert url.params["pagination"] == "false"
    assert "channelid" not in url.params


async def test_fresh_entry_is_revalidated_with_etag(sr_client, upstream):
    def respond(request: httpx.Request) -> httpx.Response:
        if request.headers.get("if-none-match") == '"v1"':
            return httpx.Response(304)
        return httpx.Response(200, json=CHANNELS, headers={"ETag": '"v1"'})

    upstream.routes["channels"] = respond

    first = await sr_client.fetch("channels")
    second = await sr_client.fetch("channels")

    assert first == second == CHANNELS
    assert len(upstream.requests) == 2
    assert "if-none-match" not in upstream.requests[0].headers
    assert upstream.requests[1].headers["if-none-match"] == '"v1"'


async def test_not_modified_refreshes_expiry(sr_client, upstream, clock):
    upstream.routes["channels"] = lambda request: (
        httpx.Response(304, headers={"Cache-Control": "max-age=60"})
        if "if-none-match" in request.headers
        else httpx.Response(200, json=CHANNELS, headers={"ETag": '"v1"', "Cache-Control": "max-age=60"})
    )

    await sr_client.fetch("channels")
    url = sr_client.build_url("channels")
    assert sr_client.get_entry(url).expires_at == clock.now + 60

    clock.advance(30)
    await sr_client.fetch("channels")
    assert sr_client.get_entry(url).expires_at == clock.now + 60


async def test_expired_entry_is_refetched_without_validator(sr_client, upstream, clock):
    upstream.routes["channels"] = lambda request: httpx.Response(
        200, json=CHANNELS, headers={"ETag": '"v1"'}
    )

    await sr_client.fetch("channels")
    clock.advance(DEFAULT_CACHE_TTL_SECONDS + 1)
    await sr_client.fetch("channels")

    assert "if-none-match" not in upstream.requests[1].headers


async def test_stale_entry_served_when_upstream_fails(sr_client, upstream, clock):
    upstream.routes["channels"] = CHANNELS
    await sr_client.fetch("channels")

    clock.advance(DEFAULT_CACHE_TTL_SECONDS * 10)
    upstream.routes["channels"] = lambda request: httpx.Response(503, text="down")

    assert await sr_client.fetch("channels") == CHANNELS


async def test_stale_entry_served_on_network_failure(sr_client, upstream):
    upstream.routes["channels"] = CHANNELS
    await sr_client.fetch("channels")

    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    upstream.routes["channels"] = fail
    assert await sr_client.fetch("channels") == CHANNELS


@pytest.mark.parametrize(
    "status, error_type, code",
    [
        (404, NotFoundError, ErrorCode.NOT_FOUND),
        (400, InvalidParamsError, ErrorCode.INVALID_PARAMS),
        (429, UpstreamRateLimitError, ErrorCode.RATE_LIMIT),
        (500, UpstreamServerError, ErrorCode.API_ERROR),
        (503, UpstreamServerError, ErrorCode.API_ERROR),
    ],
)
async def test_error_status_without_cache_raises_typed_error(sr_client, upstream, status, error_type, code):
    upstream.routes["episodes/get"] = lambda request: httpx.Response(
        status, text="nope", headers={"Retry-After": "30"}
    )

    with pytest.raises(error_type) as exc_info:
        await sr_client.fetch("episodes/get", {"id": 1})

    error = exc_info.value
    assert error.code == code
    assert error.http_status == status
    assert "suggestion" in error.details
    assert error.to_dict()["error"]["code"] == code.value


async def test_rate_limit_error_carries_retry_after(sr_client, upstream):
    upstream.routes["channels"] = lambda request: httpx.Response(429, headers={"Retry-After": "30"})

    with pytest.raises(UpstreamRateLimitError) as exc_info:
        await sr_client.fetch("channels")
    assert exc_info.value.details["retryAfter"] == "30"


async def test_timeout_raises_network_error(sr_client, upstream):
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    upstream.routes["channels"] = slow

    with pytest.raises(NetworkError) as exc_info:
        await sr_client.fetch("channels")
    assert "timeout" in exc_info.value.message.lower()


async def test_cache_key_is_the_exact_url(sr_client, upstream):
    upstream.routes["programs"] = {"programs": []}

    await sr_client.fetch("programs", {"channelid": 132, "programcategoryid": 5})
    await sr_client.fetch("programs", {"programcategoryid": 5, "channelid": 132})

    assert sr_client.cache_stats()["total"] == 2


async def test_xml_body_is_passed_through(sr_client, upstream):
    xml = "<sr><channels/></sr>"
    upstream.routes["channels"] = lambda request: httpx.Response(
        200, text=xml, headers={"Content-Type": "application/xml; charset=utf-8"}
    )

    assert await sr_client.fetch("channels", {"format": "xml"}) == {"format": "xml", "content": xml}


async def test_invalid_json_body_raises(sr_client, upstream):
    upstream.routes["channels"] = lambda request: httpx.Response(
        200, text="{not json", headers={"Content-Type": "application/json"}
    )

    with pytest.raises(SRAPIError):
        await sr_client.fetch("channels")


async def test_non_object_json_is_wrapped(sr_client, upstream):
    upstream.routes["channels"] = [1, 2, 3]

    assert await sr_client.fetch("channels") == {"data": [1, 2, 3]}


async def test_fetch_paginated_forces_pagination(sr_client, upstream):
    upstream.routes["episodes/index"] = {"episodes": []}

    await sr_client.fetch_paginated("episodes/index", {"programid": 1, "pagination": False})

    assert upstream.requests[0].url.params["pagination"] == "true"


async def test_cache_stats_and_clear(sr_client, upstream, clock):
    upstream.routes["channels"] = CHANNELS
    upstream.routes["programs"] = {"programs": []}

    await sr_client.fetch("channels")
    clock.advance(DEFAULT_CACHE_TTL_SECONDS + 1)
    await sr_client.fetch("programs")

    assert sr_client.cache_stats() == {"total": 2, "valid": 1, "expired": 1}

    sr_client.clear_cache()
    assert sr_client.cache_stats() == {"total": 0, "valid": 0, "expired": 0}
