"""Traffic tool handlers.

Handles:
- get_traffic_messages: Accidents, queues and disruptions per area
- get_traffic_areas: All areas, or the area containing a GPS position
"""

from typing import Any

from ...models import GetTrafficAreasParams, GetTrafficMessagesParams, ToolName
from .base import HandlerContext, ToolSpec, is_raw, pagination_of


async def handle_get_traffic_messages(
    params: GetTrafficMessagesParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "traffic/messages",
        {
            "trafficareaname": params.traffic_area_name,
            "date": params.date,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response
    return {
        "messages": response.get("messages", []),
        "pagination": pagination_of(response),
    }


async def handle_get_traffic_areas(params: GetTrafficAreasParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "traffic/areas",
        {
            "latitude": params.latitude,
            "longitude": params.longitude,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response

    # A full GPS position resolves to a single area
    if params.latitude is not None and params.longitude is not None:
        return {"area": response.get("area", response)}

    return {
        "areas": response.get("areas", []),
        "pagination": pagination_of(response),
    }


TOOLS = [
    ToolSpec(
        name=ToolName.GET_TRAFFIC_MESSAGES,
        description=(
            "Get traffic messages (accidents, queues, disruptions) from Sveriges Radio. "
            "Filter by area and date. Priority: 1 = very serious, 5 = minor disruption."
        ),
        params_model=GetTrafficMessagesParams,
        handler=handle_get_traffic_messages,
    ),
    ToolSpec(
        name=ToolName.GET_TRAFFIC_AREAS,
        description=(
            "Get traffic areas. With GPS coordinates, finds the area a position belongs to; "
            "without, lists all areas."
        ),
        params_model=GetTrafficAreasParams,
        handler=handle_get_traffic_areas,
    ),
]
