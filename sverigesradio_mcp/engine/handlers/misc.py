"""Miscellaneous tool handlers.

Handles:
- get_recently_published / get_top_stories: Toplists
- list_extra_broadcasts: Sport and special event broadcasts
- get_episode_group: Curated episode collections
- search_all: One query across programs, episodes and channels
- list_ondemand_audio_templates / list_live_audio_templates: Audio URL templates
"""

import logging
from typing import Any

from ...models import (
    EmptyParams,
    GetEpisodeGroupParams,
    GetRecentlyPublishedParams,
    GetTopStoriesParams,
    ListExtraBroadcastsParams,
    SearchAllParams,
    SearchScope,
    ToolName,
)
from ...services.errors import SRAPIError
from .base import HandlerContext, ToolSpec, pagination_of

logger = logging.getLogger(__name__)

# The upstream template endpoints return nothing useful, so the documented
# URL patterns are served instead.
ONDEMAND_AUDIO_TEMPLATES = [
    {
        "type": "ondemand",
        "format": format_,
        "quality": quality,
        "template": f"https://www.sverigesradio.se/topsy/ljudfil/srapi/{{audioId}}{suffix}",
        "parameters": {"audioId": "Audio file ID from episode/broadcast (integer)"},
        "example": f"https://www.sverigesradio.se/topsy/ljudfil/srapi/12345678{suffix}",
    }
    for format_, quality, suffix in (
        ("mp3", "high", ".mp3"),
        ("m4a", "high", "-hi.m4a"),
        ("m4a", "medium", "-med.m4a"),
        ("m4a", "low", "-lo.m4a"),
    )
]

LIVE_AUDIO_TEMPLATES = [
    {
        "type": "live",
        "format": format_,
        "quality": quality,
        "template": f"https://sverigesradio.se/topsy/direkt/srapi/{{channelId}}{suffix}",
        "parameters": {"channelId": "Channel ID (integer)"},
        "example": f"https://sverigesradio.se/topsy/direkt/srapi/163{suffix}",
    }
    for format_, quality, suffix in (
        ("mp3", "high", "-hi.mp3"),
        ("mp3", "medium", "-med.mp3"),
        ("mp3", "low", "-lo.mp3"),
        ("m3u", "high", "-hi.m3u"),
    )
]


async def handle_get_recently_published(
    params: GetRecentlyPublishedParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "lastpublished",
        {"audioquality": params.audio_quality, "page": params.page, "size": params.size},
    )
    return {
        "shows": response.get("shows", []),
        "pagination": pagination_of(response),
    }


async def handle_get_top_stories(params: GetTopStoriesParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch("topstories", {"programid": params.program_id})
    return {
        "topstories": response.get("shows") or response.get("topstories") or [],
        "pagination": pagination_of(response),
    }


async def handle_list_extra_broadcasts(
    params: ListExtraBroadcastsParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "extra/broadcasts",
        {"date": params.date, "sort": params.sort, "page": params.page, "size": params.size},
    )
    return {
        "broadcasts": response.get("broadcasts", []),
        "pagination": pagination_of(response),
    }


async def handle_get_episode_group(params: GetEpisodeGroupParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "episodes/group", {"id": params.group_id, "page": params.page, "size": params.size}
    )
    group = response.get("episodegroup") or {}
    return {
        "group": {
            "id": group.get("id", params.group_id),
            "title": group.get("title"),
            "description": group.get("description"),
            "episodes": group.get("episodes", []),
        },
        "pagination": pagination_of(response),
    }


async def handle_search_all(params: SearchAllParams, ctx: HandlerContext) -> dict[str, Any]:
    """Search each requested category; a failing category yields an empty list."""
    searches = {
        SearchScope.PROGRAMS: (
            "programs",
            {"filter": "program.name", "filtervalue": params.query},
            "programs",
        ),
        SearchScope.EPISODES: ("episodes/search", {"query": params.query}, "episodes"),
        SearchScope.CHANNELS: (
            "channels",
            {"filter": "channel.name", "filtervalue": params.query},
            "channels",
        ),
    }

    results: dict[str, list] = {}
    errors: dict[str, str] = {}
    for scope, (endpoint, query, key) in searches.items():
        if params.search_in not in (SearchScope.ALL, scope):
            continue
        try:
            response = await ctx.client.fetch(endpoint, {**query, "size": params.limit})
        except SRAPIError as e:
            logger.warning(f"search_all: {scope} search failed: {e.message}")
            results[key] = []
            errors[key] = e.code
            continue
        results[key] = response.get(key, [])

    result: dict[str, Any] = {
        "query": params.query,
        "searchIn": params.search_in,
        "results": results,
        "totalResults": sum(len(items) for items in results.values()),
    }
    if errors:
        result["errors"] = errors
    return result


async def handle_list_ondemand_audio_templates(params: EmptyParams, ctx: HandlerContext) -> dict[str, Any]:
    return {
        "templates": ONDEMAND_AUDIO_TEMPLATES,
        "description": (
            "URL templates for on-demand audio (podcasts/episodes). Replace {audioId} "
            "with the audio ID from an episode or broadcast."
        ),
        "note": (
            "The audio ID is in episode.listenpodfile.id, episode.downloadpodfile.id "
            "or broadcast.broadcastfiles[].id"
        ),
    }


async def handle_list_live_audio_templates(params: EmptyParams, ctx: HandlerContext) -> dict[str, Any]:
    return {
        "templates": LIVE_AUDIO_TEMPLATES,
        "description": "URL templates for live audio. Replace {channelId} with a channel ID.",
        "note": (
            "The channel ID is channel.id from list_channels. "
            "Examples: P1=132, P2=163, P3=164, P4 Stockholm=701"
        ),
    }


TOOLS = [
    ToolSpec(
        name=ToolName.GET_RECENTLY_PUBLISHED,
        description="Get the most recently published broadcasts and podcasts from Sveriges Radio.",
        params_model=GetRecentlyPublishedParams,
        handler=handle_get_recently_published,
    ),
    ToolSpec(
        name=ToolName.GET_TOP_STORIES,
        description=(
            "Get featured content from Sveriges Radio, either from the SR front page "
            "or from a specific program."
        ),
        params_model=GetTopStoriesParams,
        handler=handle_get_top_stories,
    ),
    ToolSpec(
        name=ToolName.LIST_EXTRA_BROADCASTS,
        description="List extra broadcasts (sport, special events) from Sveriges Radio.",
        params_model=ListExtraBroadcastsParams,
        handler=handle_list_extra_broadcasts,
    ),
    ToolSpec(
        name=ToolName.GET_EPISODE_GROUP,
        description='Get a curated group of episodes (e.g. "Famous criminal cases").',
        params_model=GetEpisodeGroupParams,
        handler=handle_get_episode_group,
    ),
    ToolSpec(
        name=ToolName.SEARCH_ALL,
        description=(
            "Global search across programs, episodes and channels at once. Useful when "
            "you do not know where the content lives."
        ),
        params_model=SearchAllParams,
        handler=handle_search_all,
    ),
    ToolSpec(
        name=ToolName.LIST_ONDEMAND_AUDIO_TEMPLATES,
        description="Get URL templates showing how on-demand audio links are built.",
        params_model=EmptyParams,
        handler=handle_list_ondemand_audio_templates,
    ),
    ToolSpec(
        name=ToolName.LIST_LIVE_AUDIO_TEMPLATES,
        description="Get URL templates showing how live audio stream links are built.",
        params_model=EmptyParams,
        handler=handle_list_live_audio_templates,
    ),
]
