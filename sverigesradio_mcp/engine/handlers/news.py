"""News tool handlers: news programs and their latest episodes."""

from typing import Any

from ...models import GetLatestNewsEpisodesParams, ListNewsProgramsParams, ToolName
from .base import HandlerContext, ToolSpec, is_raw, pagination_of


async def handle_list_news_programs(params: ListNewsProgramsParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "news", {"page": params.page, "size": params.size, "format": params.format}
    )
    if is_raw(response):
        return response
    return {
        "programs": response.get("programs", []),
        "pagination": pagination_of(response),
    }


async def handle_get_latest_news_episodes(
    params: GetLatestNewsEpisodesParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "news/episodes", {"page": params.page, "size": params.size, "format": params.format}
    )
    if is_raw(response):
        return response
    return {
        "episodes": response.get("episodes", []),
        "pagination": pagination_of(response),
        "timestamp": ctx.timestamp(),
    }


TOOLS = [
    ToolSpec(
        name=ToolName.LIST_NEWS_PROGRAMS,
        description=(
            "List all Sveriges Radio news programs (Ekot, Ekonomiekot, Kulturnytt, P4 Nyheter, etc.)."
        ),
        params_model=ListNewsProgramsParams,
        handler=handle_list_news_programs,
    ),
    ToolSpec(
        name=ToolName.GET_LATEST_NEWS_EPISODES,
        description=(
            "Get the latest news episodes from all news programs (at most one day old). "
            "Good for a quick news overview."
        ),
        params_model=GetLatestNewsEpisodesParams,
        handler=handle_get_latest_news_episodes,
    ),
]
