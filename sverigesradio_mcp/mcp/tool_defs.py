"""MCP tool definitions for the Sveriges Radio server.

Definitions returned by tools/list are generated from the registered tool
specs: each ``inputSchema`` is the JSON Schema of the same pydantic model
that validates the tool's arguments, so schema and validation cannot drift.

Tool Categories:
    - Channels: list_channels, get_channel_rightnow
    - Schedule: get_channel_schedule, get_program_broadcasts, get_all_rightnow
    - Programs: search_programs, get_program, list_program_categories,
      get_program_schedule, list_broadcasts, list_podfiles, get_podfile
    - Episodes: list_episodes, search_episodes, get_episode,
      get_episodes_batch, get_latest_episode
    - Playlists: get_playlist_rightnow, get_channel_playlist,
      get_program_playlist, get_episode_playlist
    - Traffic: get_traffic_messages, get_traffic_areas
    - News: list_news_programs, get_latest_news_episodes
    - Misc: get_recently_published, get_top_stories, list_extra_broadcasts,
      get_episode_group, search_all, list_ondemand_audio_templates,
      list_live_audio_templates
"""

from typing import Any

from ..engine.handlers import TOOL_SPECS, ToolSpec


def input_schema(spec: ToolSpec) -> dict[str, Any]:
    """JSON Schema (camelCase property names) for a tool's arguments."""
    schema = spec.params_model.model_json_schema(by_alias=True)
    schema.pop("title", None)
    schema.pop("description", None)
    schema.setdefault("properties", {})
    schema["type"] = "object"
    return schema


def tool_definition(spec: ToolSpec) -> dict[str, Any]:
    return {
        "name": spec.name.value,
        "description": spec.description,
        "inputSchema": input_schema(spec),
    }


TOOL_DEFINITIONS: list[dict[str, Any]] = [tool_definition(spec) for spec in TOOL_SPECS]
