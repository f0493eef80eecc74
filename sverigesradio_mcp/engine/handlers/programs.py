"""Program tool handlers.

Handles:
- search_programs: Program search with client-side relevance ranking
- get_program: Program details
- list_program_categories: All categories, or one category
- get_program_schedule: When and where a program airs
- list_broadcasts: A program's broadcasts (available 30 days)
- list_podfiles / get_podfile: Podcast files
"""

from typing import Any

from ...models import (
    GetPodfileParams,
    GetProgramParams,
    GetProgramScheduleParams,
    ListBroadcastsParams,
    ListPodfilesParams,
    ListProgramCategoriesParams,
    SearchProgramsParams,
    ToolName,
)
from .base import HandlerContext, ToolSpec, is_raw, pagination_of

# Upstream text filtering is unreliable, so a text query fetches one large
# page and ranks it locally.
SEARCH_FETCH_SIZE = 200

EXACT_NAME_SCORE = 100
NAME_PREFIX_SCORE = 50
NAME_CONTAINS_SCORE = 30
WORD_IN_NAME_SCORE = 10
WORD_IN_DESCRIPTION_SCORE = 5


def score_program(program: dict[str, Any], query: str) -> int:
    """Relevance of one program for a free-text query (0 = no match)."""
    query_lower = query.lower()
    name = (program.get("name") or "").lower()
    description = (program.get("description") or "").lower()

    score = 0
    if name == query_lower:
        score += EXACT_NAME_SCORE
    elif name.startswith(query_lower):
        score += NAME_PREFIX_SCORE
    elif query_lower in name:
        score += NAME_CONTAINS_SCORE

    for word in query_lower.split():
        if word in name:
            score += WORD_IN_NAME_SCORE
        if word in description:
            score += WORD_IN_DESCRIPTION_SCORE
    return score


def rank_programs(programs: list[dict[str, Any]], query: str, limit: int | None = None) -> list[dict[str, Any]]:
    """Drop non-matching programs and order the rest by descending relevance."""
    scored = [(score_program(program, query), program) for program in programs]
    matches = [item for item in scored if item[0] > 0]
    matches.sort(key=lambda item: item[0], reverse=True)
    ranked = [program for _, program in matches]
    return ranked[:limit] if limit else ranked


async def handle_search_programs(params: SearchProgramsParams, ctx: HandlerContext) -> dict[str, Any]:
    query: dict[str, Any] = {
        "programcategoryid": params.program_category_id,
        "channelid": params.channel_id,
        "hasondemand": params.has_on_demand,
        "isarchived": params.is_archived,
        "format": params.format,
    }
    if params.filter and params.filter_value:
        query["filter"] = params.filter
        query["filtervalue"] = params.filter_value

    if params.query:
        query["size"] = SEARCH_FETCH_SIZE
        query["page"] = 1
    else:
        # Ranking replaces upstream sorting when a text query is given
        query["sort"] = params.sort
        query["page"] = params.page
        query["size"] = params.size

    response = await ctx.client.fetch("programs", query)
    if is_raw(response):
        return response

    programs = response.get("programs", [])
    if not params.query:
        return {"programs": programs, "pagination": pagination_of(response)}

    programs = rank_programs(programs, params.query, params.size)
    return {
        "programs": programs,
        "pagination": {
            **(pagination_of(response) or {}),
            "totalhits": len(programs),
            "note": "Client-side filtering used for better search results",
        },
        "searchInfo": {
            "method": "client_side_relevance_ranking",
            "note": "The SR API has limited search. Results were fetched and ranked by relevance locally.",
        },
    }


async def handle_get_program(params: GetProgramParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(f"programs/{params.program_id}", {"format": params.format})
    if is_raw(response):
        return response
    return {"program": response.get("program", response)}


async def handle_list_program_categories(
    params: ListProgramCategoriesParams, ctx: HandlerContext
) -> dict[str, Any]:
    if params.category_id is not None:
        response = await ctx.client.fetch(
            f"programcategories/{params.category_id}", {"format": params.format}
        )
        if is_raw(response):
            return response
        return {"category": response.get("programcategory", response)}

    response = await ctx.client.fetch(
        "programcategories",
        {"page": params.page, "size": params.size, "format": params.format},
    )
    if is_raw(response):
        return response
    return {
        "categories": response.get("programcategories", []),
        "pagination": pagination_of(response),
    }


async def handle_get_program_schedule(
    params: GetProgramScheduleParams, ctx: HandlerContext
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
        "schedule": response.get("schedule", []),
        "pagination": pagination_of(response),
    }


async def handle_list_broadcasts(params: ListBroadcastsParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "broadcasts",
        {
            "programid": params.program_id,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response
    return {
        "broadcasts": response.get("broadcasts", []),
        "pagination": pagination_of(response),
        "programName": response.get("name"),
    }


async def handle_list_podfiles(params: ListPodfilesParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "podfiles",
        {
            "programid": params.program_id,
            "page": params.page,
            "size": params.size,
            "format": params.format,
        },
    )
    if is_raw(response):
        return response
    return {
        "podfiles": response.get("podfiles", []),
        "pagination": pagination_of(response),
    }


async def handle_get_podfile(params: GetPodfileParams, ctx: HandlerContext) -> dict[str, Any]:
    response = await ctx.client.fetch(f"podfiles/{params.podfile_id}", {"format": params.format})
    if is_raw(response):
        return response
    return {"podfile": response.get("podfile", response)}


TOOLS = [
    ToolSpec(
        name=ToolName.SEARCH_PROGRAMS,
        description=(
            "Search Sveriges Radio programs by name, ranked by relevance. TIP: narrow "
            "results with programCategoryId or channelId, e.g. channelId=164 for P3 "
            "programs or programCategoryId=82 for documentaries."
        ),
        params_model=SearchProgramsParams,
        handler=handle_search_programs,
    ),
    ToolSpec(
        name=ToolName.GET_PROGRAM,
        description=(
            "Get detailed information about a program, including description, channel, "
            "contact info and podcast groups."
        ),
        params_model=GetProgramParams,
        handler=handle_get_program,
    ),
    ToolSpec(
        name=ToolName.LIST_PROGRAM_CATEGORIES,
        description=(
            "List all program categories (e.g. News, Music, Sport, Culture, Society) "
            "or get a single category."
        ),
        params_model=ListProgramCategoriesParams,
        handler=handle_list_program_categories,
    ),
    ToolSpec(
        name=ToolName.GET_PROGRAM_SCHEDULE,
        description="Get the schedule for a specific program: when it airs and on which channels.",
        params_model=GetProgramScheduleParams,
        handler=handle_get_program_schedule,
    ),
    ToolSpec(
        name=ToolName.LIST_BROADCASTS,
        description=(
            "List the available broadcasts of a program. Broadcasts stay available "
            "for 30 days after publication."
        ),
        params_model=ListBroadcastsParams,
        handler=handle_list_broadcasts,
    ),
    ToolSpec(
        name=ToolName.LIST_PODFILES,
        description="List the podcast files of a program, including download URLs.",
        params_model=ListPodfilesParams,
        handler=handle_list_podfiles,
    ),
    ToolSpec(
        name=ToolName.GET_PODFILE,
        description="Get one podcast file with URL, size, duration and publication date.",
        params_model=GetPodfileParams,
        handler=handle_get_podfile,
    ),
]
