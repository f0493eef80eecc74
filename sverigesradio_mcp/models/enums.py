"""Enumeration types for the Sveriges Radio MCP Server."""

from enum import StrEnum


class ToolName(StrEnum):
    """Available MCP tools."""

    # Channels
    LIST_CHANNELS = "list_channels"
    GET_CHANNEL_RIGHTNOW = "get_channel_rightnow"
    # Schedule
    GET_CHANNEL_SCHEDULE = "get_channel_schedule"
    GET_PROGRAM_BROADCASTS = "get_program_broadcasts"
    GET_ALL_RIGHTNOW = "get_all_rightnow"
    # Programs
    SEARCH_PROGRAMS = "search_programs"
    GET_PROGRAM = "get_program"
    LIST_PROGRAM_CATEGORIES = "list_program_categories"
    GET_PROGRAM_SCHEDULE = "get_program_schedule"
    LIST_BROADCASTS = "list_broadcasts"
    LIST_PODFILES = "list_podfiles"
    GET_PODFILE = "get_podfile"
    # Episodes
    LIST_EPISODES = "list_episodes"
    SEARCH_EPISODES = "search_episodes"
    GET_EPISODE = "get_episode"
    GET_EPISODES_BATCH = "get_episodes_batch"
    GET_LATEST_EPISODE = "get_latest_episode"
    # Playlists
    GET_PLAYLIST_RIGHTNOW = "get_playlist_rightnow"
    GET_CHANNEL_PLAYLIST = "get_channel_playlist"
    GET_PROGRAM_PLAYLIST = "get_program_playlist"
    GET_EPISODE_PLAYLIST = "get_episode_playlist"
    # Traffic
    GET_TRAFFIC_MESSAGES = "get_traffic_messages"
    GET_TRAFFIC_AREAS = "get_traffic_areas"
    # News
    LIST_NEWS_PROGRAMS = "list_news_programs"
    GET_LATEST_NEWS_EPISODES = "get_latest_news_episodes"
    # Misc
    GET_RECENTLY_PUBLISHED = "get_recently_published"
    GET_TOP_STORIES = "get_top_stories"
    LIST_EXTRA_BROADCASTS = "list_extra_broadcasts"
    GET_EPISODE_GROUP = "get_episode_group"
    SEARCH_ALL = "search_all"
    LIST_ONDEMAND_AUDIO_TEMPLATES = "list_ondemand_audio_templates"
    LIST_LIVE_AUDIO_TEMPLATES = "list_live_audio_templates"


class AudioQuality(StrEnum):
    LOW = "low"
    NORMAL = "normal"
    HI = "hi"


class ResponseFormat(StrEnum):
    """Upstream response format. XML bodies are passed through untouched."""

    JSON = "json"
    XML = "xml"


class ChannelType(StrEnum):
    NATIONAL = "Rikskanal"
    LOCAL = "Lokal kanal"


class ChannelSort(StrEnum):
    CHANNEL_NAME = "channel.name"


class ExtraBroadcastSort(StrEnum):
    LOCAL_START_TIME = "localstarttime"
    CHANNEL = "channel"


class SearchScope(StrEnum):
    """Where search_all looks."""

    PROGRAMS = "programs"
    EPISODES = "episodes"
    CHANNELS = "channels"
    ALL = "all"
