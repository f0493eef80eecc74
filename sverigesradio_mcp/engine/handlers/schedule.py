"""Schedule tool handlers (TV guide style listings).

Handles:
- get_channel_schedule: A channel's schedule for one day
- get_program_broadcasts: Upcoming broadcasts of a program
- get_all_rightnow: What is on air on every channel
"""

from typing import Any

from ...models import (
    GetAllRightNowParams,
    GetChannelScheduleParams,
    GetProgramBroadcastsParams,
    ToolName,
)
from .base import HandlerContext, ToolSpec, is_raw, pagination_of


async def handle_get_channel_schedule(
    params: GetChannelScheduleParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "scheduledepisodes",
        {
            "channelid": params.channel_id,
            "date": params.date,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response

    return {
        "schedule": response.get("schedule", []),
        "pagination": pagination_of(response),
        "channelId": params.channel_id,
        "date": params.date or ctx.today(),
    }


async def handle_get_program_broadcasts(
    params: GetProgramBroadcastsParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "scheduledepisodes",
        {
            "programid": params.program_id,
            "fromdate": params.from_date,
            "todate": params.to_date,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response

    return {
        "broadcasts": response.get("schedule", []),
        "pagination": pagination_of(response),
        "programId": params.program_id,
    }


async def handle_get_all_rightnow(params: GetAllRightNowParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "scheduledepisodes/rightnow",
        {
            "channelid": params.channel_id,
            "sort": params.sort_by,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response

    if params.channel_id is not None:
        return {"channel": response.get("channel"), "timestamp": ctx.timestamp()}

    return {
        "channels": response.get("channels", []),
        "pagination": pagination_of(response),
        "timestamp": ctx.timestamp(),
    }


TOOLS = [
    ToolSpec(
        name=ToolName.GET_CHANNEL_SCHEDULE,
        description=(
            "Get the schedule (TV guide style) for a radio channel on a given date. "
            "Lists everything broadcast during the day in chronological order."
        ),
        params_model=GetChannelScheduleParams,
        handler=handle_get_channel_schedule,
    ),
    ToolSpec(
        name=ToolName.GET_PROGRAM_BROADCASTS,
        description="Get upcoming broadcasts for a specific program, i.e. when it airs next.",
        params_model=GetProgramBroadcastsParams,
        handler=handle_get_program_broadcasts,
    ),
    ToolSpec(
        name=ToolName.GET_ALL_RIGHTNOW,
        description=(
            "Overview of what is on air RIGHT NOW on ALL Sveriges Radio channels at once "
            "(or a single channel)."
        ),
        params_model=GetAllRightNowParams,
        handler=handle_get_all_rightnow,
    ),
]
