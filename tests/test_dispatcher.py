import json

import httpx
import pytest

from sverigesradio_mcp.engine.handlers.programs import rank_programs, score_program
from sverigesradio_mcp.mcp import TOOL_DEFINITIONS
from sverigesradio_mcp.mcp.jsonrpc import INVALID_PARAMS, JSONRPCError
from sverigesradio_mcp.models import ToolName


def payload_of(result: dict) -> dict:
    return json.loads(result["content"][0]["text"])


def test_every_tool_is_registered(dispatcher):
    assert len(dispatcher) == len(ToolName) == 32
    assert all(tool.value in dispatcher for tool in ToolName)


def test_input_schemas_use_camel_case(dispatcher):
    tools = {tool["name"]: tool for tool in dispatcher.list_tools()}
    schema = tools["get_channel_schedule"]["inputSchema"]

    assert schema["type"] == "object"
    assert "channelId" in schema["properties"]
    assert schema["required"] == ["channelId"]
    assert tools["list_live_audio_templates"]["inputSchema"]["properties"] == {}


def test_static_definitions_match_dispatcher(dispatcher):
    assert TOOL_DEFINITIONS == dispatcher.list_tools()


async def test_unknown_tool_is_a_protocol_error(dispatcher):
    with pytest.raises(JSONRPCError) as exc_info:
        await dispatcher.call("get_weather", {})

    assert exc_info.value.code == INVALID_PARAMS
    assert exc_info.value.message == "Unknown tool: get_weather"


async def test_validation_lists_every_violated_field(dispatcher, upstream):
    with pytest.raises(JSONRPCError) as exc_info:
        await dispatcher.call("get_channel_schedule", {"channelId": -1, "size": 500, "date": "18/10/2026"})

    message = exc_info.value.message
    assert exc_info.value.code == INVALID_PARAMS
    assert message.startswith("Validation failed:")
    assert "channelId:" in message
    assert "size:" in message
    assert "date:" in message
    assert upstream.requests == []


async def test_missing_required_argument(dispatcher):
    with pytest.raises(JSONRPCError) as exc_info:
        await dispatcher.call("get_program", None)

    assert "programId" in exc_info.value.message


async def test_reversed_date_range_is_rejected(dispatcher):
    with pytest.raises(JSONRPCError) as exc_info:
        await dispatcher.call(
            "get_program_broadcasts",
            {"programId": 1, "fromDate": "2026-10-18", "toDate": "2026-10-01"},
        )

    assert "fromDate must be before or equal to toDate" in exc_info.value.message


async def test_successful_call_returns_text_content(dispatcher, upstream):
    upstream.routes["channels"] = {
        "channels": [{"id": 132, "name": "P1"}],
        "pagination": {"page": 1, "totalhits": 1},
    }

    result = await dispatcher.call("list_channels", {"size": 5})

    assert "isError" not in result
    assert result["content"][0]["type"] == "text"
    assert payload_of(result)["channels"] == [{"id": 132, "name": "P1"}]
    assert upstream.requests[0].url.params["size"] == "5"


async def test_upstream_failure_becomes_tool_error(dispatcher):
    result = await dispatcher.call("get_program", {"programId": 999999})

    payload = payload_of(result)
    assert result["isError"] is True
    assert payload["code"] == "NOT_FOUND"
    assert "suggestion" in payload["details"]


async def test_unexpected_exception_is_sanitized(dispatcher, upstream):
    def explode(request):
        raise ValueError("secret internals")

    upstream.routes["programs/1"] = explode

    result = await dispatcher.call("get_program", {"programId": 1})

    assert result["isError"] is True
    assert payload_of(result)["code"] == "INTERNAL_ERROR"
    assert "secret" not in result["content"][0]["text"]


async def test_missing_playlist_is_an_empty_song_list(dispatcher):
    result = await dispatcher.call("get_channel_playlist", {"channelId": 132})

    payload = payload_of(result)
    assert "isError" not in result
    assert payload["songs"] == []
    assert payload["metadata"]["hasMusicMetadata"] is False


async def test_search_programs_ranks_locally(dispatcher, upstream):
    upstream.routes["programs"] = {
        "programs": [
            {"name": "Sommar i P1", "description": "Ekot gästar"},
            {"name": "Ekot", "description": "Nyheter"},
            {"name": "Lunchekot", "description": ""},
            {"name": "P3 Musik", "description": "Musik"},
            {"name": "Ekot extra", "description": ""},
        ]
    }

    result = await dispatcher.call("search_programs", {"query": "Ekot", "size": 3})

    payload = payload_of(result)
    assert [p["name"] for p in payload["programs"]] == ["Ekot", "Ekot extra", "Lunchekot"]
    assert payload["pagination"]["totalhits"] == 3
    request = upstream.requests[0]
    assert request.url.params["size"] == "200"
    assert "sort" not in request.url.params


async def test_search_all_reports_failing_categories(dispatcher, upstream):
    upstream.routes["programs"] = {"programs": [{"name": "Ekot"}]}
    upstream.routes["channels"] = {"channels": []}
    upstream.routes["episodes/search"] = lambda request: httpx.Response(500, text="boom")

    result = await dispatcher.call("search_all", {"query": "ekot"})

    payload = payload_of(result)
    assert "isError" not in result
    assert payload["results"]["episodes"] == []
    assert payload["errors"] == {"episodes": "API_ERROR"}
    assert payload["totalResults"] == 1


def test_score_program_weights():
    assert score_program({"name": "Ekot"}, "ekot") == 100 + 10
    assert score_program({"name": "Ekot extra"}, "ekot") == 50 + 10
    assert score_program({"name": "Lunchekot"}, "ekot") == 30 + 10
    assert score_program({"name": "Sommar", "description": "ekot"}, "ekot") == 5
    assert score_program({"name": "Sommar"}, "ekot") == 0


def test_rank_programs_drops_non_matches():
    programs = [{"name": "Musik"}, {"name": "Ekot"}]

    assert rank_programs(programs, "ekot") == [{"name": "Ekot"}]
