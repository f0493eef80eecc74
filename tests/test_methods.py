import json
from datetime import datetime

import pytest

from sverigesradio_mcp.mcp.jsonrpc import INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND, JSONRPCError
from sverigesradio_mcp.mcp.methods import (
    LEGACY_PROTOCOL_VERSION,
    MessageProcessor,
    is_initialize_request,
)
from sverigesradio_mcp.mcp.prompts import get_prompt


def request(method: str, id=1, params=None) -> dict:
    message = {"jsonrpc": "2.0", "id": id, "method": method}
    if params is not None:
        message["params"] = params
    return message


def notification(method: str) -> dict:
    return {"jsonrpc": "2.0", "method": method}


@pytest.fixture
def processor(dispatcher) -> MessageProcessor:
    return MessageProcessor(dispatcher)


async def test_initialize_advertises_capabilities(processor):
    response = await processor.process(request("initialize", params={"clientInfo": {"name": "test"}}))

    result = response["result"]
    assert result["protocolVersion"] == "2025-03-26"
    assert set(result["capabilities"]) == {"tools", "resources", "prompts"}
    assert result["serverInfo"]["name"] == "sverigesradio-mcp"


async def test_legacy_processor_reports_legacy_version(dispatcher):
    processor = MessageProcessor(dispatcher, LEGACY_PROTOCOL_VERSION)

    response = await processor.process(request("initialize"))

    assert response["result"]["protocolVersion"] == "2024-11-05"


async def test_unknown_method(processor):
    response = await processor.process(request("tools/destroy", id="x"))

    assert response == {
        "jsonrpc": "2.0",
        "id": "x",
        "error": {"code": METHOD_NOT_FOUND, "message": "Method not found: tools/destroy"},
    }


async def test_notifications_get_no_response(processor):
    assert await processor.process(notification("notifications/initialized")) is None
    assert await processor.process(notification("notifications/unknown")) is None


async def test_client_responses_are_ignored(processor):
    assert await processor.process({"jsonrpc": "2.0", "id": 3, "result": {}}) is None


async def test_invalid_messages(processor):
    assert (await processor.process({"id": 1, "method": "ping"}))["error"]["code"] == INVALID_REQUEST
    assert (await processor.process("ping"))["error"]["code"] == INVALID_REQUEST
    assert (await processor.process([]))["error"]["code"] == INVALID_REQUEST
    bad_params = await processor.process(request("tools/list", params=[1, 2]))
    assert bad_params["error"]["code"] == INVALID_PARAMS


async def test_batch_answers_requests_only(processor):
    responses = await processor.process(
        [
            request("ping", id=1),
            notification("notifications/initialized"),
            request("nope", id=2),
        ]
    )

    assert [r["id"] for r in responses] == [1, 2]
    assert responses[0]["result"] == {}
    assert responses[1]["error"]["code"] == METHOD_NOT_FOUND


async def test_tools_list(processor):
    response = await processor.process(request("tools/list"))

    assert len(response["result"]["tools"]) == 32


async def test_tools_call_unknown_tool(processor):
    response = await processor.process(request("tools/call", params={"name": "nope", "arguments": {}}))

    assert response["error"] == {"code": INVALID_PARAMS, "message": "Unknown tool: nope"}


async def test_tools_call_offline_tool(processor):
    response = await processor.process(
        request("tools/call", params={"name": "list_live_audio_templates"})
    )

    payload = json.loads(response["result"]["content"][0]["text"])
    assert payload["templates"]


async def test_resources_are_idempotent(processor):
    listing = await processor.process(request("resources/list"))
    uris = [r["uri"] for r in listing["result"]["resources"]]
    assert uris == [
        "sr://api/info",
        "sr://channels/all",
        "sr://audio/quality-guide",
        "sr://categories/programs",
    ]

    first = await processor.process(request("resources/read", params={"uri": "sr://channels/all"}))
    second = await processor.process(request("resources/read", params={"uri": "sr://channels/all"}))
    assert first == second
    content = first["result"]["contents"][0]
    assert content["mimeType"] == "application/json"
    assert json.loads(content["text"])["rikskanaler"][0]["name"] == "P1"


async def test_unknown_resource(processor):
    response = await processor.process(request("resources/read", params={"uri": "sr://nope"}))

    assert response["error"]["code"] == INVALID_PARAMS


async def test_prompts_list_and_get(processor):
    listing = await processor.process(request("prompts/list"))
    names = [p["name"] for p in listing["result"]["prompts"]]
    assert names == [
        "find-podcast",
        "whats-on-now",
        "traffic-nearby",
        "news-briefing",
        "explore-schedule",
        "whats-playing-now",
    ]

    response = await processor.process(
        request("prompts/get", params={"name": "find-podcast", "arguments": {"topic": "historia"}})
    )
    message = response["result"]["messages"][0]
    assert message["role"] == "user"
    assert '"historia"' in message["content"]["text"]


async def test_prompt_missing_required_argument(processor):
    response = await processor.process(request("prompts/get", params={"name": "traffic-nearby"}))

    assert response["error"]["code"] == INVALID_PARAMS
    assert "location" in response["error"]["message"]


async def test_prompt_arguments_must_be_an_object(processor):
    response = await processor.process(
        request("prompts/get", params={"name": "find-podcast", "arguments": ["historia"]})
    )

    assert response["error"]["code"] == INVALID_PARAMS
    assert "arguments must be an object" in response["error"]["message"]


def test_explore_schedule_defaults_to_today():
    now = datetime(2026, 10, 18, 9, 30)

    result = get_prompt("explore-schedule", {"channel": "P3"}, now=now)

    text = result["messages"][0]["content"]["text"]
    assert 'date: "2026-10-18"' in text
    assert "IDAG" in text


def test_traffic_prompt_rejects_bad_severity():
    with pytest.raises(JSONRPCError):
        get_prompt("traffic-nearby", {"location": "Stockholm", "severity": "high"})


def test_payload_classifiers():
    assert is_initialize_request([notification("x"), request("initialize")])
    assert not is_initialize_request(request("ping"))
