"""Tool parameter models (Pydantic *Params classes).

The same model validates ``tools/call`` arguments and produces the
``inputSchema`` advertised by ``tools/list``. Fields are snake_case in Python
and camelCase on the wire (``channelId``, ``startDateTime`` ...).
"""

import re
from datetime import UTC, date, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .enums import (
    AudioQuality,
    ChannelSort,
    ChannelType,
    ExtraBroadcastSort,
    ResponseFormat,
    SearchScope,
)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2}(\.\d{3})?(Z|[+-]\d{2}:\d{2})?)?$")
_ID_LIST_RE = re.compile(r"^\d+(\s*,\s*\d+)*$")


def _check_iso_date(value: str) -> str:
    if not _ISO_DATE_RE.match(value):
        raise ValueError("Date must be in ISO 8601 format (YYYY-MM-DD)")
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise ValueError("Date must be a valid date") from e
    return value


def _check_iso_datetime(value: str) -> str:
    if not _ISO_DATETIME_RE.match(value):
        raise ValueError(
            "DateTime must be in ISO 8601 format "
            "(YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS or YYYY-MM-DDTHH:MM:SSZ)"
        )
    try:
        datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError("DateTime must be a valid date/time") from e
    return value


def _check_id_list(value: str) -> str:
    if not _ID_LIST_RE.match(value.strip()):
        raise ValueError('Must be comma-separated numeric IDs, e.g. "123,456,789"')
    return value.strip()


def _as_utc(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


IsoDate = Annotated[str, AfterValidator(_check_iso_date)]
IsoDateTime = Annotated[str, AfterValidator(_check_iso_datetime)]
EntityId = Annotated[int, Field(gt=0)]


# ============ BASE MODELS ============


class ToolParams(BaseModel):
    """Base for all tool parameter models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class PaginationParams(ToolParams):
    page: int | None = Field(default=None, ge=1, description="Page number")
    size: int | None = Field(default=None, ge=1, le=100, description="Results per page (max 100)")


class FormatParams(ToolParams):
    format: ResponseFormat | None = Field(
        default=None, description="Response format (default: json). XML is returned verbatim."
    )


def _check_range(start: str | None, end: str | None, start_name: str, end_name: str) -> None:
    if start and end and _as_utc(start) > _as_utc(end):
        raise ValueError(f"{start_name} must be before or equal to {end_name}")


class DateRangeParams(ToolParams):
    from_date: IsoDate | None = Field(default=None, description="From date (YYYY-MM-DD)")
    to_date: IsoDate | None = Field(default=None, description="To date (YYYY-MM-DD)")

    @model_validator(mode="after")
    def check_date_range(self):
        _check_range(self.from_date, self.to_date, "fromDate", "toDate")
        return self


class DateTimeRangeParams(ToolParams):
    start_date_time: IsoDateTime | None = Field(
        default=None,
        description="Start (YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS). Default: today",
    )
    end_date_time: IsoDateTime | None = Field(
        default=None,
        description="End (YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS). Default: start + 1 day",
    )

    @model_validator(mode="after")
    def check_date_time_range(self):
        _check_range(self.start_date_time, self.end_date_time, "startDateTime", "endDateTime")
        return self


class EmptyParams(ToolParams):
    """Tools that take no arguments."""


# ============ CHANNELS ============


class ListChannelsParams(PaginationParams):
    """Parameters for list_channels tool."""

    channel_id: EntityId | None = Field(
        default=None, description="Specific channel ID, e.g. 132 (P1), 163 (P2), 164 (P3)"
    )
    channel_type: ChannelType | None = Field(default=None, description="Filter on channel type")
    audio_quality: AudioQuality | None = Field(default=None, description="Audio quality (default: hi)")
    pagination: bool | None = Field(default=None, description="Enable pagination (default: true)")


class GetChannelRightNowParams(ToolParams):
    """Parameters for get_channel_rightnow tool."""

    channel_id: EntityId | None = Field(
        default=None, description="Specific channel (all channels when omitted)"
    )
    sort_by: ChannelSort | None = Field(default=None, description="Sort by channel name")


# ============ SCHEDULE ============


class GetChannelScheduleParams(PaginationParams, FormatParams):
    """Parameters for get_channel_schedule tool."""

    channel_id: EntityId = Field(..., description="Channel ID, e.g. 132 for P1, 164 for P3")
    date: IsoDate | None = Field(default=None, description="Date (YYYY-MM-DD). Default: today")


class GetProgramBroadcastsParams(DateRangeParams, PaginationParams, FormatParams):
    """Parameters for get_program_broadcasts tool."""

    program_id: EntityId = Field(..., description="Program ID")


class GetAllRightNowParams(PaginationParams, FormatParams):
    """Parameters for get_all_rightnow tool."""

    channel_id: EntityId | None = Field(
        default=None, description="Only return this channel instead of all channels"
    )
    sort_by: ChannelSort | None = Field(default=None, description="Sort alphabetically by channel name")


# ============ PROGRAMS ============


class SearchProgramsParams(PaginationParams, FormatParams):
    """Parameters for search_programs tool."""

    query: str | None = Field(
        default=None,
        min_length=1,
        max_length=200,
        description="Text search in program names (results ranked by relevance)",
    )
    program_category_id: int | None = Field(
        default=None, ge=0, description="Filter on category ID (see list_program_categories)"
    )
    channel_id: EntityId | None = Field(default=None, description="Filter on channel ID")
    has_on_demand: bool | None = Field(default=None, description="Only programs with podcasts/on-demand")
    is_archived: bool | None = Field(default=None, description="Include archived programs")
    filter: str | None = Field(default=None, description='Filter field, e.g. "program.name"')
    filter_value: str | None = Field(default=None, description="Filter value")
    sort: str | None = Field(default=None, description='Sort order, e.g. "name" or "name+desc"')


class GetProgramParams(FormatParams):
    """Parameters for get_program tool."""

    program_id: EntityId = Field(..., description="Program ID")


class ListProgramCategoriesParams(PaginationParams, FormatParams):
    """Parameters for list_program_categories tool."""

    category_id: int | None = Field(
        default=None, ge=0, description="Fetch the category with this ID instead of listing all"
    )


class GetProgramScheduleParams(DateRangeParams, PaginationParams, FormatParams):
    """Parameters for get_program_schedule tool."""

    program_id: EntityId = Field(..., description="Program ID")


class ListBroadcastsParams(PaginationParams, FormatParams):
    """Parameters for list_broadcasts tool."""

    program_id: EntityId = Field(..., description="Program ID")


class ListPodfilesParams(PaginationParams, FormatParams):
    """Parameters for list_podfiles tool."""

    program_id: EntityId = Field(..., description="Program ID")


class GetPodfileParams(FormatParams):
    """Parameters for get_podfile tool."""

    podfile_id: EntityId = Field(..., description="Podfile ID")


# ============ EPISODES ============


class ListEpisodesParams(DateRangeParams, PaginationParams, FormatParams):
    """Parameters for list_episodes tool."""

    program_id: EntityId = Field(..., description="Program ID")
    audio_quality: AudioQuality | None = Field(default=None, description="Audio quality (default: hi)")


class SearchEpisodesParams(PaginationParams, FormatParams):
    """Parameters for search_episodes tool."""

    query: str = Field(..., min_length=1, max_length=200, description="Search term")
    channel_id: EntityId | None = Field(default=None, description="Filter on channel ID")
    program_id: EntityId | None = Field(default=None, description="Filter on program ID")


class GetEpisodeParams(FormatParams):
    """Parameters for get_episode tool."""

    episode_id: EntityId = Field(..., description="Episode ID")
    audio_quality: AudioQuality | None = Field(default=None, description="Audio quality")


class GetEpisodesBatchParams(FormatParams):
    """Parameters for get_episodes_batch tool."""

    episode_ids: Annotated[str, AfterValidator(_check_id_list)] = Field(
        ..., description='Comma-separated episode IDs, e.g. "12345,67890,11111"'
    )
    audio_quality: AudioQuality | None = Field(default=None, description="Audio quality")


class GetLatestEpisodeParams(FormatParams):
    """Parameters for get_latest_episode tool."""

    program_id: EntityId = Field(..., description="Program ID")
    audio_quality: AudioQuality | None = Field(default=None, description="Audio quality")


# ============ PLAYLISTS ============


class GetPlaylistRightNowParams(FormatParams):
    """Parameters for get_playlist_rightnow tool."""

    channel_id: EntityId = Field(
        ..., description="Channel ID, e.g. 163 for P2, 2576 for Din gata, 132 for P1"
    )


class GetChannelPlaylistParams(DateTimeRangeParams, PaginationParams, FormatParams):
    """Parameters for get_channel_playlist tool."""

    channel_id: EntityId = Field(..., description="Channel ID")


class GetProgramPlaylistParams(DateTimeRangeParams, PaginationParams, FormatParams):
    """Parameters for get_program_playlist tool."""

    program_id: EntityId = Field(..., description="Program ID")


class GetEpisodePlaylistParams(FormatParams):
    """Parameters for get_episode_playlist tool."""

    episode_id: EntityId = Field(..., description="Episode ID")


# ============ TRAFFIC ============


class GetTrafficMessagesParams(PaginationParams, FormatParams):
    """Parameters for get_traffic_messages tool."""

    traffic_area_name: str | None = Field(
        default=None, description='Traffic area, e.g. "Stockholm", "Uppland", "Norrbotten"'
    )
    date: IsoDate | None = Field(default=None, description="Date of messages (YYYY-MM-DD)")


class GetTrafficAreasParams(PaginationParams, FormatParams):
    """Parameters for get_traffic_areas tool."""

    latitude: float | None = Field(default=None, ge=-90, le=90, description="Latitude (GPS lookup)")
    longitude: float | None = Field(default=None, ge=-180, le=180, description="Longitude (GPS lookup)")


# ============ NEWS ============


class ListNewsProgramsParams(PaginationParams, FormatParams):
    """Parameters for list_news_programs tool."""


class GetLatestNewsEpisodesParams(PaginationParams, FormatParams):
    """Parameters for get_latest_news_episodes tool."""


# ============ MISC ============


class GetRecentlyPublishedParams(PaginationParams):
    """Parameters for get_recently_published tool."""

    audio_quality: AudioQuality | None = Field(default=None, description="Audio quality")


class GetTopStoriesParams(ToolParams):
    """Parameters for get_top_stories tool."""

    program_id: EntityId | None = Field(
        default=None, description="Program ID (SR front page when omitted)"
    )


class ListExtraBroadcastsParams(PaginationParams):
    """Parameters for list_extra_broadcasts tool."""

    date: IsoDate | None = Field(default=None, description="Date (YYYY-MM-DD)")
    sort: ExtraBroadcastSort | None = Field(default=None, description="Sort order")


class GetEpisodeGroupParams(PaginationParams):
    """Parameters for get_episode_group tool."""

    group_id: EntityId = Field(..., description="Episode group ID")


class SearchAllParams(ToolParams):
    """Parameters for search_all tool."""

    query: str = Field(..., min_length=1, max_length=200, description="Search term")
    search_in: SearchScope = Field(default=SearchScope.ALL, description="Where to search (default: all)")
    limit: int = Field(default=10, ge=1, le=50, description="Max results per category (max 50)")
