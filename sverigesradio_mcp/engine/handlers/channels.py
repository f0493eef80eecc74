"""Channel tool handlers.

Handles:
- list_channels: All channels or a single channel, with live stream links
- get_channel_rightnow: Previous/current/next broadcast per channel
"""

from typing import Any

from ...models import GetChannelRightNowParams, ListChannelsParams, ToolName
from .base import HandlerContext, ToolSpec, pagination_of


async def handle_list_channels(params: ListChannelsParams, ctx: HandlerContext) -> dict[str, Any]:
    endpoint = f"channels/{params.channel_id}" if params.channel_id else "channels"

    query: dict[str, Any] = {
        "audioquality": params.audio_quality,
        "pagination": params.pagination,
        "page": params.page,
        "size": params.size,
    }
    if params.channel_type:
        query["filter"] = "channel.channeltype"
        query["filtervalue"] = params.channel_type

    response = await ctx.client.fetch(endpoint, query)

    if params.channel_id:
        return {"channel": response.get("channel", response)}

    return {
        "channels": response.get("channels", []),
        "pagination": pagination_of(response),
    }


async def handle_get_channel_rightnow(
    params: GetChannelRightNowParams, ctx: HandlerContext
) -> dict[str, Any]:
    """What is on air right now, for one channel or all of them."""
    response = await ctx.client.fetch(
        "scheduledepisodes/rightnow",
        {"channelid": params.channel_id, "sort": params.sort_by},
    )

    if params.channel_id:
        channels = response.get("channels") or [None]
        return {"channel": response.get("channel", channels[0])}

    return {
        "channels": response.get("channels", []),
        "pagination": pagination_of(response),
    }


TOOLS = [
    ToolSpec(
        name=ToolName.LIST_CHANNELS,
        description=(
            "List all Sveriges Radio channels (P1, P2, P3, P4 and local channels), "
            "including live stream links and channel information."
        ),
        params_model=ListChannelsParams,
        handler=handle_list_channels,
    ),
    ToolSpec(
        name=ToolName.GET_CHANNEL_RIGHTNOW,
        description=(
            "Show what is on air RIGHT NOW on Sveriges Radio, for one channel or all "
            "channels, with the previous, current and next program."
        ),
        params_model=GetChannelRightNowParams,
        handler=handle_get_channel_rightnow,
    ),
]
