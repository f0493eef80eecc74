"""Playlist (music metadata) tool handlers.

Handles:
- get_playlist_rightnow: Previous/current/next song on a channel
- get_channel_playlist: Songs played on a channel in a time range
- get_program_playlist: Songs played in a program in a time range
- get_episode_playlist: Songs played in one episode

Speech-only channels and programs have no song data; the upstream answers
those with 404, which is reported as an empty song list rather than an error.
"""

from typing import Any

from ...models import (
    GetChannelPlaylistParams,
    GetEpisodePlaylistParams,
    GetPlaylistRightNowParams,
    GetProgramPlaylistParams,
    ToolName,
)
from ...services.errors import NotFoundError
from .base import HandlerContext, ToolSpec, is_raw

DEFAULT_COPYRIGHT = "Sveriges Radio"


def _song_list(response: dict[str, Any]) -> dict[str, Any]:
    songs = response.get("song") or []
    return {
        "copyright": response.get("copyright"),
        "songs": songs,
        "metadata": {"hasMusicMetadata": bool(songs), "count": len(songs)},
    }


def _empty_song_list(reason: str, note: str) -> dict[str, Any]:
    return {
        "copyright": DEFAULT_COPYRIGHT,
        "songs": [],
        "metadata": {"hasMusicMetadata": False, "count": 0, "reason": reason, "note": note},
    }


async def _fetch_songs(
    ctx: HandlerContext, endpoint: str, query: dict[str, Any], reason: str, note: str
) -> dict[str, Any]:
    try:
        response = await ctx.client.fetch(endpoint, query)
    except NotFoundError:
        return _empty_song_list(reason, note)
    if is_raw(response):
        return response
    return _song_list(response)


async def handle_get_playlist_rightnow(
    params: GetPlaylistRightNowParams, ctx: HandlerContext
) -> dict[str, Any]:
    response = await ctx.client.fetch(
        "playlists/rightnow", {"channelid": params.channel_id, "format": params.format}
    )
    if is_raw(response):
        return response

    has_music = bool(response.get("song") or response.get("nextsong") or response.get("previoussong"))
    metadata: dict[str, Any] = {"hasMusicMetadata": has_music}
    if has_music:
        metadata["contentType"] = "music"
    else:
        metadata["reason"] = "speech_channel" if response.get("channel") else "no_metadata_available"
        metadata["contentType"] = "speech"

    return {
        "copyright": response.get("copyright"),
        "currentSong": response.get("song"),
        "nextSong": response.get("nextsong"),
        "previousSong": response.get("previoussong"),
        "channel": response.get("channel") or {"id": params.channel_id, "name": "Unknown"},
        "metadata": metadata,
        "timestamp": ctx.timestamp(),
    }


async def handle_get_channel_playlist(
    params: GetChannelPlaylistParams, ctx: HandlerContext
) -> dict[str, Any]:
    result = await _fetch_songs(
        ctx,
        "playlists/getplaylistbychannelid",
        {
            "id": params.channel_id,
            "startdatetime": params.start_date_time,
            "enddatetime": params.end_date_time,
            "size": params.size,
            "page": params.page,
            "format": params.format,
        },
        reason="no_data_for_interval",
        note="Channel may be speech-only or no songs were played in the time range",
    )
    if is_raw(result):
        return result
    return {
        **result,
        "channelId": params.channel_id,
        "startDateTime": params.start_date_time or "today",
        "endDateTime": params.end_date_time or "startDateTime + 1 day",
    }


async def handle_get_program_playlist(
    params: GetProgramPlaylistParams, ctx: HandlerContext
) -> dict[str, Any]:
    result = await _fetch_songs(
        ctx,
        "playlists/getplaylistbyprogramid",
        {
            "id": params.program_id,
            "startdatetime": params.start_date_time,
            "enddatetime": params.end_date_time,
            "size": params.size,
            "page": params.page,
            "format": params.format,
        },
        reason="no_data_for_interval",
        note="Program may be speech-only or no songs were played in the time range",
    )
    if is_raw(result):
        return result
    return {
        **result,
        "programId": params.program_id,
        "startDateTime": params.start_date_time or "today",
        "endDateTime": params.end_date_time or "startDateTime + 1 day",
    }


async def handle_get_episode_playlist(
    params: GetEpisodePlaylistParams, ctx: HandlerContext
) -> dict[str, Any]:
    result = await _fetch_songs(
        ctx,
        "playlists/getplaylistbyepisodeid",
        {"id": params.episode_id, "format": params.format},
        reason="speech_episode",
        note="Episode does not contain music metadata",
    )
    if is_raw(result):
        return result
    return {**result, "episodeId": params.episode_id}


TOOLS = [
    ToolSpec(
        name=ToolName.GET_PLAYLIST_RIGHTNOW,
        description=(
            "Get the song playing RIGHT NOW on a channel, plus the previous and next song, "
            "with artist, title, album, label, composer, producer, lyricist and timestamps."
        ),
        params_model=GetPlaylistRightNowParams,
        handler=handle_get_playlist_rightnow,
    ),
    ToolSpec(
        name=ToolName.GET_CHANNEL_PLAYLIST,
        description=(
            "Get every song played on a channel during a time range, with title, artist, "
            "composer, album, label and timestamps."
        ),
        params_model=GetChannelPlaylistParams,
        handler=handle_get_channel_playlist,
    ),
    ToolSpec(
        name=ToolName.GET_PROGRAM_PLAYLIST,
        description="Get every song played in a program during a time range, with full song details.",
        params_model=GetProgramPlaylistParams,
        handler=handle_get_program_playlist,
    ),
    ToolSpec(
        name=ToolName.GET_EPISODE_PLAYLIST,
        description="Get the complete playlist of one episode with full song details and timestamps.",
        params_model=GetEpisodePlaylistParams,
        handler=handle_get_episode_playlist,
    ),
]
