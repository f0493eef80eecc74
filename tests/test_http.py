import json
import uuid

import pytest
from conftest import AsgiExchange, make_settings
from fastapi.testclient import TestClient

from sverigesradio_mcp.middleware import SecurityHeadersMiddleware
from sverigesradio_mcp.server import _filter_sentry_event, init_sentry

INITIALIZE = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {"protocolVersion": "2025-03-26", "clientInfo": {"name": "pytest", "version": "1"}},
}


def rpc(method: str, id=2, params=None) -> dict:
    return {"jsonrpc": "2.0", "id": id, "method": method, "params": params or {}}


def initialize(client: TestClient, headers: dict | None = None) -> str:
    response = client.post("/mcp", json=INITIALIZE, headers=headers)
    assert response.status_code == 200
    return response.headers["mcp-session-id"]


# ============ STREAMABLE HTTP ============


def test_initialize_returns_session_header(client):
    response = client.post("/mcp", json=INITIALIZE)

    assert response.status_code == 200
    session_id = response.headers["mcp-session-id"]
    uuid.UUID(session_id)
    body = response.json()
    assert body["id"] == 1
    assert body["result"]["serverInfo"]["name"] == "sverigesradio-mcp"
    assert client.app.state.server.sessions.get(session_id).state == "active"


def test_session_requests_echo_header(client):
    session_id = initialize(client)

    response = client.post("/mcp", json=rpc("tools/list"), headers={"Mcp-Session-Id": session_id})

    assert response.status_code == 200
    assert response.headers["mcp-session-id"] == session_id
    assert len(response.json()["result"]["tools"]) == 32


def test_unknown_method_over_http(client):
    session_id = initialize(client)

    response = client.post("/mcp", json=rpc("nope/nope"), headers={"Mcp-Session-Id": session_id})

    assert response.json()["error"]["code"] == -32601


def test_missing_session_header(client):
    response = client.post("/mcp", json=rpc("tools/list"))

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == -32003
    assert body["id"] == 2


def test_malformed_session_header(client):
    response = client.post("/mcp", json=rpc("tools/list"), headers={"Mcp-Session-Id": "abc"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == -32003


def test_unknown_session_is_recreated(client):
    session_id = str(uuid.uuid4())

    response = client.post("/mcp", json=rpc("ping"), headers={"Mcp-Session-Id": session_id})

    assert response.status_code == 200
    assert response.headers["mcp-session-id"] == session_id
    assert session_id in client.app.state.server.sessions


def test_notifications_only_body_is_accepted(client):
    session_id = initialize(client)

    response = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "method": "notifications/initialized"},
        headers={"Mcp-Session-Id": session_id},
    )

    assert response.status_code == 202
    assert response.content == b""


def test_batch_request(client):
    session_id = initialize(client)

    response = client.post(
        "/mcp",
        json=[rpc("ping", id=10), {"jsonrpc": "2.0", "method": "notifications/initialized"}, rpc("ping", id=11)],
        headers={"Mcp-Session-Id": session_id},
    )

    assert [r["id"] for r in response.json()] == [10, 11]


def test_parse_error(client):
    response = client.post("/mcp", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == -32700


@pytest.mark.parametrize(
    "payload, request_id",
    [({"jsonrpc": "2.0", "id": 7}, 7), ([], None), (["junk"], None), (42, None)],
)
def test_invalid_messages_get_error_envelope(client, payload, request_id):
    session_id = initialize(client)

    response = client.post("/mcp", json=payload, headers={"Mcp-Session-Id": session_id})

    assert response.status_code == 200
    body = response.json()
    error = body[0] if isinstance(body, list) else body
    assert error["error"]["code"] == -32600
    assert error["id"] == request_id


def test_payload_too_large(app_factory):
    with TestClient(app_factory(max_json_payload_size=16)) as client:
        response = client.post("/mcp", json=INITIALIZE)

    assert response.status_code == 413
    assert response.json()["error"]["code"] == -32600


async def test_declared_length_over_limit_is_rejected_unread(app_factory):
    exchange = AsgiExchange(
        app_factory(max_json_payload_size=16),
        "POST",
        "/mcp",
        headers={"Content-Type": "application/json", "Content-Length": "4096"},
    ).start()
    await exchange.finish()

    assert exchange.status == 413
    assert json.loads(exchange.text)["error"]["code"] == -32600
    assert exchange.body_read is False


def test_delete_session(client):
    session_id = initialize(client)

    first = client.delete("/mcp", headers={"Mcp-Session-Id": session_id})
    second = client.delete("/mcp", headers={"Mcp-Session-Id": session_id})

    assert first.status_code == 204
    assert second.status_code == 404
    assert second.json()["error"]["code"] == -32003


def test_delete_unknown_session(client):
    response = client.delete("/mcp", headers={"Mcp-Session-Id": str(uuid.uuid4())})

    assert response.status_code == 404
    assert response.json()["error"]["message"].startswith("Session not found")


def test_tool_call_over_http(client, upstream):
    upstream.routes["channels/132"] = {"channel": {"id": 132, "name": "P1"}}
    session_id = initialize(client)

    response = client.post(
        "/mcp",
        json=rpc("tools/call", params={"name": "list_channels", "arguments": {"channelId": 132}}),
        headers={"Mcp-Session-Id": session_id},
    )

    result = response.json()["result"]
    assert "isError" not in result
    assert '"P1"' in result["content"][0]["text"]


async def test_get_mcp_opens_event_stream(app_factory):
    app = app_factory()
    sessions = app.state.server.sessions
    exchange = AsgiExchange(app, "GET", "/mcp").start()
    await exchange.wait_for(lambda: exchange.started)

    session_id = exchange.headers["mcp-session-id"]
    assert exchange.status == 200
    assert exchange.headers["content-type"].startswith("text/event-stream")
    assert sessions.get(session_id).state == "active"

    await sessions.get(session_id).transport.send({"jsonrpc": "2.0", "method": "notifications/message"})
    await exchange.wait_for(lambda: "notifications/message" in exchange.text)
    await sessions.close(session_id)
    await exchange.finish()

    assert exchange.text.startswith("event: message\n")


async def test_get_mcp_resumes_existing_session(app_factory):
    app = app_factory()
    sessions = app.state.server.sessions
    session = sessions.create()
    exchange = AsgiExchange(app, "GET", "/mcp", headers={"Mcp-Session-Id": session.id}).start()
    await exchange.wait_for(lambda: exchange.started)

    assert exchange.headers["mcp-session-id"] == session.id
    assert session.state == "active"

    await sessions.close(session.id)
    await exchange.finish()


# ============ LEGACY HTTP+SSE ============


async def test_sse_registers_session_and_announces_endpoint(app_factory):
    app = app_factory()
    legacy = app.state.server.legacy_sessions
    exchange = AsgiExchange(app, "GET", "/sse").start()
    await exchange.wait_for(lambda: "event: endpoint" in exchange.text)

    assert exchange.headers["content-type"].startswith("text/event-stream")
    first_frame = exchange.text.split("\n\n", 1)[0]
    assert first_frame.startswith("event: endpoint\ndata: /messages?sessionId=")
    session_id = first_frame.rsplit("sessionId=", 1)[1]
    assert session_id in legacy

    legacy.close(session_id)
    await exchange.finish()

    assert session_id not in legacy


def test_messages_requires_session_id(client):
    response = client.post("/messages", json=rpc("ping"))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == -32003


def test_messages_unknown_session(client):
    response = client.post(f"/messages?sessionId={uuid.uuid4()}", json=rpc("ping"))

    assert response.status_code == 404


def test_messages_reply_on_stream(client):
    session = client.app.state.server.legacy_sessions.open()

    response = client.post(f"/messages?sessionId={session.id}", json=rpc("initialize", id=5))

    assert response.status_code == 202
    queued = session.outbox._queue.get_nowait()
    assert queued["id"] == 5
    assert queued["result"]["protocolVersion"] == "2024-11-05"


# ============ AUTH ============


def test_auth_missing_token(app_factory):
    with TestClient(app_factory(mcp_auth_token="s3cret", base_url="https://sr.example")) as client:
        response = client.post("/mcp", json=INITIALIZE)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == -32000
    assert response.headers["www-authenticate"] == (
        'Bearer realm="MCP Server", '
        'resource_metadata="https://sr.example/.well-known/oauth-protected-resource"'
    )


def test_auth_wrong_token(app_factory):
    with TestClient(app_factory(mcp_auth_token="s3cret")) as client:
        response = client.post("/mcp", json=INITIALIZE, headers={"Authorization": "Bearer nope"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == -32001


def test_auth_valid_token(app_factory):
    with TestClient(app_factory(mcp_auth_token="s3cret")) as client:
        response = client.post("/mcp", json=INITIALIZE, headers={"Authorization": "Bearer s3cret"})
        health = client.get("/health")

    assert response.status_code == 200
    assert health.status_code == 200
    assert health.json()["authRequired"] is True


def test_protected_resource_metadata(app_factory):
    with TestClient(app_factory(base_url="https://sr.example/")) as client:
        response = client.get("/.well-known/oauth-protected-resource")

    assert response.json()["resource"] == "https://sr.example/mcp"
    assert response.json()["bearer_methods_supported"] == ["header"]


# ============ RATE LIMITING ============


def test_rate_limit_rejects_with_retry_after(app_factory):
    with TestClient(app_factory(rate_limit_requests=60)) as client:
        statuses = [client.post("/mcp", json=INITIALIZE).status_code for _ in range(60)]
        rejected = client.post("/mcp", json=INITIALIZE)
        health = client.get("/health")

    assert statuses == [200] * 60
    assert rejected.status_code == 429
    assert int(rejected.headers["retry-after"]) > 0
    assert rejected.headers["x-ratelimit-remaining"] == "0"
    assert rejected.json()["error"]["code"] == -32002
    assert health.status_code == 200


def test_rate_limit_headers_on_allowed_responses(client):
    response = client.post("/mcp", json=INITIALIZE)

    assert response.headers["x-ratelimit-limit"] == "60"
    assert response.headers["x-ratelimit-remaining"] == "59"
    assert "x-ratelimit-reset" in response.headers


# ============ MISC ENDPOINTS ============


def test_health(client):
    initialize(client)

    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["service"] == "sverigesradio-mcp"
    assert (body["tools"], body["resources"], body["prompts"]) == (32, 4, 6)
    assert body["authRequired"] is False
    assert body["sessions"] == {"total": 1, "pending": 0, "active": 1, "legacy": 0}
    assert body["cache"] == {"total": 0, "valid": 0, "expired": 0}


def test_unknown_path_lists_endpoints(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == -32601
    assert "mcp" in error["data"]["endpoints"]


def test_unsupported_method_lists_endpoints(client):
    response = client.put("/mcp", json={})

    assert response.status_code == 405
    error = response.json()["error"]
    assert error["code"] == -32601
    assert error["data"]["endpoints"]["mcp"] == "POST|GET|DELETE /mcp"


def test_security_headers(client):
    response = client.get("/health")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert "x-request-id" in response.headers


def test_cors_exposes_session_header(client):
    response = client.post("/mcp", json=INITIALIZE, headers={"Origin": "https://app.example"})

    assert response.headers["access-control-allow-origin"] == "*"
    assert "mcp-session-id" in response.headers["access-control-expose-headers"].lower()


def test_unhandled_error_becomes_internal_error_envelope():
    async def broken(scope, receive, send):
        raise RuntimeError("boom")

    client = TestClient(SecurityHeadersMiddleware(broken))
    response = client.get("/")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == -32603
    assert "x-request-id" in response.headers


# ============ ERROR TRACKING ============


def test_sentry_events_are_redacted():
    event = {"request": {"headers": {"authorization": "Bearer s3cret", "mcp-session-id": "abc", "accept": "*/*"}}}

    headers = _filter_sentry_event(event)["request"]["headers"]

    assert headers == {"authorization": "[REDACTED]", "mcp-session-id": "[REDACTED]", "accept": "*/*"}


def test_sentry_disabled_without_dsn():
    assert init_sentry(make_settings()) is False


def test_sentry_initialized_with_dsn(monkeypatch):
    sentry_sdk = pytest.importorskip("sentry_sdk")
    calls = []
    monkeypatch.setattr(sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))

    enabled = init_sentry(make_settings(sentry_dsn="https://key@sentry.example/1", environment="production"))

    assert enabled is True
    assert calls[0]["environment"] == "production"
    assert calls[0]["traces_sample_rate"] == 0.1
