"""Tool handlers for the Sveriges Radio MCP Server.

This package contains the tool handlers organized by domain:
- channels: Channel listing and what is on air now
- schedule: Channel and program schedules
- programs: Program search, details, categories, broadcasts, podfiles
- episodes: Episode listing, search and lookup
- playlists: Music metadata (songs) per channel, program and episode
- traffic: Traffic messages and areas
- news: News programs and episodes
- misc: Toplists, extra broadcasts, episode groups, global search, audio templates

Each handler is a standalone async function that takes:
- params: the tool's validated pydantic *Params model
- ctx: HandlerContext - shared dependencies (the upstream client)

And returns the reshaped result as a JSON-serializable dict.
"""

from . import channels, episodes, misc, news, playlists, programs, schedule, traffic
from .base import HandlerContext, HandlerFunc, ToolSpec

TOOL_SPECS: list[ToolSpec] = [
    *channels.TOOLS,
    *schedule.TOOLS,
    *programs.TOOLS,
    *episodes.TOOLS,
    *playlists.TOOLS,
    *traffic.TOOLS,
    *news.TOOLS,
    *misc.TOOLS,
]

__all__ = [
    "HandlerContext",
    "HandlerFunc",
    "ToolSpec",
    "TOOL_SPECS",
]
