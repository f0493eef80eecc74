"""Pydantic models for the Sveriges Radio MCP Server.

Import from submodules directly for narrower imports:

    from sverigesradio_mcp.models.enums import ToolName
    from sverigesradio_mcp.models.requests import SearchProgramsParams
"""

# ============ ENUMS ============
from .enums import (
    AudioQuality,
    ChannelSort,
    ChannelType,
    ExtraBroadcastSort,
    ResponseFormat,
    SearchScope,
    ToolName,
)

# ============ REQUEST MODELS ============
from .requests import (
    EmptyParams,
    GetAllRightNowParams,
    GetChannelPlaylistParams,
    GetChannelRightNowParams,
    GetChannelScheduleParams,
    GetEpisodeGroupParams,
    GetEpisodeParams,
    GetEpisodePlaylistParams,
    GetEpisodesBatchParams,
    GetLatestEpisodeParams,
    GetLatestNewsEpisodesParams,
    GetPlaylistRightNowParams,
    GetPodfileParams,
    GetProgramBroadcastsParams,
    GetProgramParams,
    GetProgramPlaylistParams,
    GetProgramScheduleParams,
    GetRecentlyPublishedParams,
    GetTopStoriesParams,
    GetTrafficAreasParams,
    GetTrafficMessagesParams,
    ListBroadcastsParams,
    ListChannelsParams,
    ListEpisodesParams,
    ListExtraBroadcastsParams,
    ListNewsProgramsParams,
    ListPodfilesParams,
    ListProgramCategoriesParams,
    SearchAllParams,
    SearchEpisodesParams,
    SearchProgramsParams,
    ToolParams,
)

# ============ RESPONSE MODELS ============
from .responses import CacheStats, HealthResponse, SessionCounts

__all__ = [
    # Enums
    "AudioQuality",
    "ChannelSort",
    "ChannelType",
    "ExtraBroadcastSort",
    "ResponseFormat",
    "SearchScope",
    "ToolName",
    # Requests
    "ToolParams",
    "EmptyParams",
    "ListChannelsParams",
    "GetChannelRightNowParams",
    "GetChannelScheduleParams",
    "GetProgramBroadcastsParams",
    "GetAllRightNowParams",
    "SearchProgramsParams",
    "GetProgramParams",
    "ListProgramCategoriesParams",
    "GetProgramScheduleParams",
    "ListBroadcastsParams",
    "ListPodfilesParams",
    "GetPodfileParams",
    "ListEpisodesParams",
    "SearchEpisodesParams",
    "GetEpisodeParams",
    "GetEpisodesBatchParams",
    "GetLatestEpisodeParams",
    "GetPlaylistRightNowParams",
    "GetChannelPlaylistParams",
    "GetProgramPlaylistParams",
    "GetEpisodePlaylistParams",
    "GetTrafficMessagesParams",
    "GetTrafficAreasParams",
    "ListNewsProgramsParams",
    "GetLatestNewsEpisodesParams",
    "GetRecentlyPublishedParams",
    "GetTopStoriesParams",
    "ListExtraBroadcastsParams",
    "GetEpisodeGroupParams",
    "SearchAllParams",
    # Responses
    "HealthResponse",
    "SessionCounts",
    "CacheStats",
]
