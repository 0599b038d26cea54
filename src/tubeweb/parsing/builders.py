"""Build domain entities from individual renderer objects.

Each upstream renderer shape has its own hard-coded field paths; the shapes are unrelated
and share no generic fallback. Optional fields list their candidate paths in priority
order. A builder returns ``None`` whenever a required field is missing or the assembled
entity fails model validation, so one bad item never spoils the rest of its page.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Type, TypeVar, Union

from pydantic import ValidationError

from tubeweb.models.stream import StreamInfo
from tubeweb.models.thumbnails import Thumbnails
from tubeweb.models.video import Playlist, Video
from tubeweb.parsing.extractors import (
    COMPACT_STATION_RENDERER,
    GRID_PLAYLIST_RENDERER,
    GRID_VIDEO_RENDERER,
    PLAYLIST_RENDERER,
    VIDEO_RENDERER,
    parse_duration,
)
from tubeweb.parsing.json_paths import JsonPath, JsonValue, find_all, first_str, get_path, get_str

EntityT = TypeVar("EntityT", Video, Playlist, StreamInfo)

AUTHOR_SEPARATOR = " • "

_SONG_COUNT = re.compile(r"^(\d[\d,]*) songs?\b", re.IGNORECASE)
_THUMBNAIL_VIDEO_ID = re.compile(r"/vi/(.+)/", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"\d[\d,]*")

_OVERLAY_DURATION: JsonPath = ("thumbnailOverlays", "*", "thumbnailOverlayTimeStatusRenderer", "text", "simpleText")
_LENGTH_TEXT: JsonPath = ("lengthText", "simpleText")
_LONG_BYLINE: JsonPath = ("longBylineText", "runs", "*", "text")
_SHORT_BYLINE: JsonPath = ("shortBylineText", "runs", "*", "text")


def _flex_column_run(column: int, run: int) -> JsonPath:
    return ("flexColumns", column, "musicResponsiveListItemFlexColumnRenderer", "text", "runs", run, "text")


def _build(model: Type[EntityT], **fields: Any) -> Optional[EntityT]:
    try:
        return model(**fields)
    except ValidationError:
        return None


def _parse_count(text: Optional[str]) -> Optional[int]:
    """Read the leading number of a count label such as ``"1,204 videos"``."""

    if not text:
        return None
    match = _LEADING_NUMBER.search(text)
    if match is None:
        return None
    return int(match.group(0).replace(",", ""))


def join_author(artist: Optional[str], album: Optional[str]) -> Optional[str]:
    """Combine music artist and album into one display string.

    Falls back to the artist alone; without an artist there is no usable author.
    """

    if artist and album:
        return f"{artist}{AUTHOR_SEPARATOR}{album}"
    return artist or None


# ---------------------------------------------------------------------- #
# Videos                                                                 #
# ---------------------------------------------------------------------- #
def video_from_grid_video_renderer(renderer: JsonValue) -> Optional[Video]:
    video_id = get_str(renderer, ("videoId",))
    title = get_str(renderer, ("title", "simpleText"))
    duration = parse_duration(get_str(renderer, _OVERLAY_DURATION))
    author = get_str(renderer, _SHORT_BYLINE)

    if not (video_id and title and author and duration):
        return None
    return _build(Video, video_id=video_id, title=title, author=author, duration=duration)


def video_from_video_renderer(renderer: JsonValue) -> Optional[Video]:
    """Search results and playlist entries (``videoRenderer``/``playlistVideoRenderer``)."""

    video_id = get_str(renderer, ("videoId",))
    title = get_str(renderer, ("title", "runs", "*", "text"))
    duration = parse_duration(first_str(renderer, (_OVERLAY_DURATION, _LENGTH_TEXT)))
    author = first_str(renderer, (_LONG_BYLINE, _SHORT_BYLINE))

    if not (video_id and title and author and duration):
        return None
    return _build(Video, video_id=video_id, title=title, author=author, duration=duration)


def video_from_compact_video_renderer(renderer: JsonValue) -> Optional[Video]:
    video_id = get_str(renderer, ("videoId",))
    title = get_str(renderer, ("title", "simpleText"))
    duration = parse_duration(first_str(renderer, (_OVERLAY_DURATION, _LENGTH_TEXT)))
    author = get_str(renderer, _LONG_BYLINE)

    if not (video_id and title and author and duration):
        return None
    return _build(Video, video_id=video_id, title=title, author=author, duration=duration)


def video_from_music_responsive_list_item_renderer(renderer: JsonValue) -> Optional[Video]:
    """Song rows from music search: title, then ``artist • album • duration`` runs."""

    video_id = get_str(renderer, ("playlistItemData", "videoId"))
    title = get_str(renderer, _flex_column_run(0, 0))
    artist = get_str(renderer, _flex_column_run(1, 0))
    album = get_str(renderer, _flex_column_run(1, 2))
    duration = parse_duration(get_str(renderer, _flex_column_run(1, 4)))
    author = join_author(artist, album)

    if not (video_id and title and author and duration):
        return None
    return _build(Video, video_id=video_id, title=title, author=author, duration=duration)


def video_from_playlist_panel_video_renderer(renderer: JsonValue) -> Optional[Video]:
    """Entries of a generated watch queue."""

    video_id = get_str(renderer, ("videoId",))
    title = get_str(renderer, ("title", "runs", 0, "text"))
    artist = get_str(renderer, ("longBylineText", "runs", 0, "text"))
    album = get_str(renderer, ("longBylineText", "runs", 2, "text"))
    # Music videos put a view count where songs put the album.
    if album and "view" in album.lower():
        album = None
    duration = parse_duration(first_str(renderer, (("lengthText", "runs", "*", "text"), _LENGTH_TEXT)))
    author = join_author(artist, album)

    if not (video_id and title and author and duration):
        return None
    return _build(Video, video_id=video_id, title=title, author=author, duration=duration)


# ---------------------------------------------------------------------- #
# Playlists                                                              #
# ---------------------------------------------------------------------- #
def playlist_from_compact_station_renderer(renderer: JsonValue) -> Optional[Playlist]:
    """Radio stations on the music home page; these carry explicit thumbnail URLs."""

    playlist_id = get_str(renderer, ("navigationEndpoint", "watchPlaylistEndpoint", "playlistId"))
    title = get_str(renderer, ("title", "simpleText"))
    description = get_str(renderer, ("description", "simpleText"))
    video_count = _parse_count(get_str(renderer, ("videoCountText", "runs", "*", "text")))
    thumbnails = Thumbnails(
        custom_low_res_url=get_str(renderer, ("thumbnail", "thumbnails", 0, "url")),
        custom_medium_res_url=get_str(renderer, ("thumbnail", "thumbnails", 1, "url")),
        custom_high_res_url=get_str(renderer, ("thumbnail", "thumbnails", 2, "url")),
        custom_standard_res_url=get_str(renderer, ("thumbnail", "thumbnails", 1, "url")),
    )

    if not (playlist_id and title and description and thumbnails.standard_res_url):
        return None
    return _build(
        Playlist,
        playlist_id=playlist_id,
        title=title,
        description=description,
        video_count=video_count or None,
        thumbnails=thumbnails,
    )


def playlist_from_grid_playlist_renderer(renderer: JsonValue) -> Optional[Playlist]:
    playlist_id = get_str(renderer, ("playlistId",))
    title = get_str(renderer, ("title", "runs", "*", "text"))
    thumbnail_video_id = get_str(renderer, ("navigationEndpoint", "watchEndpoint", "videoId"))
    byline = get_str(renderer, _SHORT_BYLINE)
    video_count = _parse_count(get_str(renderer, ("videoCountText", "runs", "*", "text")))

    if not (playlist_id and title and byline and video_count and thumbnail_video_id):
        return None
    return _build(
        Playlist,
        playlist_id=playlist_id,
        title=title,
        author=byline,
        description=byline,
        video_count=video_count,
        thumbnails=Thumbnails(video_id=thumbnail_video_id),
    )


def playlist_from_playlist_renderer(renderer: JsonValue) -> Optional[Playlist]:
    """Playlists in general search results.

    The renderer has no thumbnail video id of its own; it is recovered from the
    ``/vi/<id>/`` segment of the first thumbnail URL, with the URL itself kept as a
    fallback.
    """

    playlist_id = get_str(renderer, ("playlistId",))
    title = get_str(renderer, ("title", "simpleText"))
    author = get_str(renderer, _SHORT_BYLINE)
    video_count = _parse_count(get_str(renderer, ("videoCount",)))

    thumbnail_url = get_str(renderer, ("thumbnails", "*", "thumbnails", "*", "url"))
    match = _THUMBNAIL_VIDEO_ID.search(thumbnail_url or "")
    thumbnails = Thumbnails(
        video_id=match.group(1) if match else None,
        custom_high_res_url=thumbnail_url,
    )

    if not (playlist_id and title and author and video_count):
        return None
    return _build(
        Playlist,
        playlist_id=playlist_id,
        title=title,
        author=author,
        video_count=video_count,
        thumbnails=thumbnails,
    )


def playlist_from_music_responsive_list_item_renderer(renderer: JsonValue) -> Optional[Playlist]:
    """Album and playlist rows from music search.

    The second run of the subtitle column holds either a song count (``"12 songs"``) or an
    album descriptor; which one is decided by matching the text.
    """

    playlist_id = next((value for value in find_all(renderer, "playlistId") if isinstance(value, str) and value), None)
    title = get_str(renderer, _flex_column_run(0, 0))
    artist = get_str(renderer, _flex_column_run(1, 0))
    text_run = get_str(renderer, _flex_column_run(1, 2))

    thumbnail_items = get_path(renderer, ("thumbnail", "musicThumbnailRenderer", "thumbnail", "thumbnails"))
    urls: List[Optional[str]] = []
    if isinstance(thumbnail_items, list):
        urls = [get_str(item, ("url",)) for item in thumbnail_items[:4]]
    urls.extend([None] * (4 - len(urls)))
    low, medium, high, standard = urls
    thumbnails = Thumbnails(
        custom_low_res_url=low,
        custom_medium_res_url=medium,
        custom_high_res_url=high,
        custom_standard_res_url=standard or medium,
    )

    video_count: Optional[int] = None
    song_count = _SONG_COUNT.match(text_run) if text_run else None
    if song_count is not None:
        video_count = int(song_count.group(1).replace(",", ""))
        author = artist
    else:
        author = join_author(artist, text_run)

    if not (playlist_id and title and author and thumbnails.standard_res_url):
        return None
    return _build(
        Playlist,
        playlist_id=playlist_id,
        title=title,
        author=author,
        video_count=video_count or None,
        thumbnails=thumbnails,
    )


# ---------------------------------------------------------------------- #
# Streams                                                                #
# ---------------------------------------------------------------------- #
def stream_info_from_format(stream_format: JsonValue) -> Optional[StreamInfo]:
    """One ``formats``/``adaptiveFormats`` entry; ciphered entries without a URL are skipped."""

    if not isinstance(stream_format, dict):
        return None
    url = stream_format.get("url")
    mime_type = stream_format.get("mimeType")
    bit_rate = stream_format.get("bitrate")

    if not (isinstance(url, str) and isinstance(mime_type, str) and isinstance(bit_rate, int)):
        return None
    return _build(StreamInfo, url=url, mime_type=mime_type, bit_rate=bit_rate)


# ---------------------------------------------------------------------- #
# Shelf shapes                                                           #
# ---------------------------------------------------------------------- #
class RendererShape(NamedTuple):
    """A renderer key paired with the builder that reads items of that shape."""

    renderer_key: str
    build: Callable[[JsonValue], Optional[Union[Video, Playlist]]]


HOME_SHELF_SHAPES: Sequence[RendererShape] = (
    RendererShape(COMPACT_STATION_RENDERER, playlist_from_compact_station_renderer),
    RendererShape(GRID_VIDEO_RENDERER, video_from_grid_video_renderer),
    RendererShape(GRID_PLAYLIST_RENDERER, playlist_from_grid_playlist_renderer),
)

SEARCH_RESULT_SHAPES: Dict[str, Callable[[JsonValue], Optional[Union[Video, Playlist]]]] = {
    VIDEO_RENDERER: video_from_video_renderer,
    PLAYLIST_RENDERER: playlist_from_playlist_renderer,
}


__all__ = [
    "AUTHOR_SEPARATOR",
    "HOME_SHELF_SHAPES",
    "RendererShape",
    "SEARCH_RESULT_SHAPES",
    "join_author",
    "playlist_from_compact_station_renderer",
    "playlist_from_grid_playlist_renderer",
    "playlist_from_music_responsive_list_item_renderer",
    "playlist_from_playlist_renderer",
    "stream_info_from_format",
    "video_from_compact_video_renderer",
    "video_from_grid_video_renderer",
    "video_from_music_responsive_list_item_renderer",
    "video_from_playlist_panel_video_renderer",
    "video_from_video_renderer",
]
