"""Episode tool handlers.

Handles:
- list_episodes: Episodes of a program, optionally within a date range
- search_episodes: Full-text episode search
- get_episode / get_episodes_batch / get_latest_episode: Episode details
"""

from typing import Any

from ...models import (
    GetEpisodeParams,
    GetEpisodesBatchParams,
    GetLatestEpisodeParams,
    ListEpisodesParams,
    SearchEpisodesParams,
    ToolName,
)
from .base import HandlerContext, ToolSpec, is_raw, pagination_of


async def handle_list_episodes(params: ListEpisodesParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "episodes/index",
        {
            "programid": params.program_id,
            "fromdate": params.from_date,
            "todate": params.to_date,
            "audioquality": params.audio_quality,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response
    return {
        "episodes": response.get("episodes", []),
        "pagination": pagination_of(response),
    }


async def handle_search_episodes(params: SearchEpisodesParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "episodes/search",
        {
            "query": params.query,
            "channelid": params.channel_id,
            "programid": params.program_id,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response
    return {
        "episodes": response.get("episodes", []),
        "pagination": pagination_of(response),
    }


async def handle_get_episode(params: GetEpisodeParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "episodes/get",
        {"id": params.episode_id, "audioquality": params.audio_quality, "format": params.format},
    )
    if is_raw(response):
        return response
    return {"episode": response.get("episode", response)}


async def handle_get_episodes_batch(
    params: GetEpisodesBatchParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "episodes/getlist",
        {"ids": params.episode_ids, "audioquality": params.audio_quality, "format": params.format},
    )
    if is_raw(response):
        return response
    return {"episodes": response.get("episodes", [])}


async def handle_get_latest_episode(
    params: GetLatestEpisodeParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "episodes/getlatest",
        {"programid": params.program_id, "audioquality": params.audio_quality, "format": params.format},
    )
    if is_raw(response):
        return response
    return {"episode": response.get("episode", response)}


TOOLS = [
    ToolSpec(
        name=ToolName.LIST_EPISODES,
        description=(
            "List the episodes of a program. Can filter on a date range and choose audio quality."
        ),
        params_model=ListEpisodesParams,
        handler=handle_list_episodes,
    ),
    ToolSpec(
        name=ToolName.SEARCH_EPISODES,
        description="Full-text search in Sveriges Radio episodes: titles, descriptions and content.",
        params_model=SearchEpisodesParams,
        handler=handle_search_episodes,
    ),
    ToolSpec(
        name=ToolName.GET_EPISODE,
        description=(
            "Get one episode with full information, including audio files for streaming "
            "and download."
        ),
        params_model=GetEpisodeParams,
        handler=handle_get_episode,
    ),
    ToolSpec(
        name=ToolName.GET_EPISODES_BATCH,
        description="Get several episodes in a single call.",
        params_model=GetEpisodesBatchParams,
        handler=handle_get_episodes_batch,
    ),
    ToolSpec(
        name=ToolName.GET_LATEST_EPISODE,
        description="Get the most recent episode of a program.",
        params_model=GetLatestEpisodeParams,
        handler=handle_get_latest_episode,
    ),
]
