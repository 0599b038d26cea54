"""Locate renderer objects and session values inside upstream JSON responses.

Every function here is pure and tolerant: a missing or malformed target yields ``None``
or an empty list, never an exception.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar

from tubeweb.config.settings import ContinuationPolicy, SectionPolicy
from tubeweb.parsing.json_paths import JsonValue, count_items, find_all, get_str

ShapeT = TypeVar("ShapeT", bound=Tuple)

CONTINUATION_TOKEN_KEYS = ("token", "continuation")

ITEM_SECTION_RENDERER = "itemSectionRenderer"
SHELF_RENDERER = "shelfRenderer"
VIDEO_RENDERER = "videoRenderer"
PLAYLIST_RENDERER = "playlistRenderer"
GRID_VIDEO_RENDERER = "gridVideoRenderer"
GRID_PLAYLIST_RENDERER = "gridPlaylistRenderer"
COMPACT_STATION_RENDERER = "compactStationRenderer"
COMPACT_VIDEO_RENDERER = "compactVideoRenderer"
PLAYLIST_VIDEO_RENDERER = "playlistVideoRenderer"
PLAYLIST_PANEL_VIDEO_RENDERER = "playlistPanelVideoRenderer"
MUSIC_RESPONSIVE_LIST_ITEM_RENDERER = "musicResponsiveListItemRenderer"

_DURATION_PART = re.compile(r"\d+")


def extract_continuation_token(
    document: JsonValue,
    policy: ContinuationPolicy = ContinuationPolicy.LONGEST,
) -> Optional[str]:
    """Find the cursor for the next page anywhere in ``document``.

    ``token`` fields are searched first and ``continuation`` fields only when no ``token``
    exists. Among several candidates the longest wins under the default policy (ties go to
    the first seen). ``None`` means the document carries no cursor at all.
    """

    for key in CONTINUATION_TOKEN_KEYS:
        candidates = [value for value in find_all(document, key) if isinstance(value, str) and value]
        if not candidates:
            continue
        if policy is ContinuationPolicy.FIRST:
            return candidates[0]
        return max(candidates, key=len)
    return None


def extract_visitor_data(document: JsonValue) -> Optional[str]:
    """Return the session (visitor) token echoed back on later requests."""

    return get_str(document, ("responseContext", "visitorData"))


def extract_playlist_title(document: JsonValue) -> Optional[str]:
    return get_str(document, ("metadata", "playlistMetadataRenderer", "title"))


def extract_stream_data(document: JsonValue) -> List[Dict[str, JsonValue]]:
    """Return muxed formats followed by adaptive formats from a player response."""

    streaming_data = document.get("streamingData") if isinstance(document, dict) else None
    if not isinstance(streaming_data, dict):
        return []

    formats: List[Dict[str, JsonValue]] = []
    for key in ("formats", "adaptiveFormats"):
        entries = streaming_data.get(key)
        if isinstance(entries, list):
            formats.extend(entry for entry in entries if isinstance(entry, dict))
    return formats


def extract_search_result_contents(
    document: JsonValue,
    policy: SectionPolicy = SectionPolicy.MOST_ITEMS,
) -> Optional[List[JsonValue]]:
    """Pick the ``contents`` list of the item section holding the search results.

    Search responses repeat unrelated item sections (ads, "people also watched"); the one
    with the most entries is taken to be the result list, first seen on ties.
    """

    sections = extract_renderers(document, ITEM_SECTION_RENDERER)
    if not sections:
        return None

    chosen = sections[0]
    if policy is SectionPolicy.MOST_ITEMS:
        for section in sections[1:]:
            if count_items(section.get("contents")) > count_items(chosen.get("contents")):
                chosen = section

    contents = chosen.get("contents")
    return contents if isinstance(contents, list) else None


def extract_renderers(document: JsonValue, renderer_key: str) -> List[Dict[str, JsonValue]]:
    """All objects stored under ``renderer_key`` in document order."""

    return [value for value in find_all(document, renderer_key) if isinstance(value, dict)]


def extract_shelf_renderers(document: JsonValue) -> List[Dict[str, JsonValue]]:
    return extract_renderers(document, SHELF_RENDERER)


def extract_shelf_title(shelf: JsonValue) -> Optional[str]:
    return get_str(shelf, ("title", "runs", "*", "text"))


def probe_shelf_items(
    shelf: JsonValue,
    shapes: Sequence[ShapeT],
) -> Optional[Tuple[ShapeT, List[Dict[str, JsonValue]]]]:
    """Find the item shape a shelf is made of.

    ``shapes`` is an ordered sequence of tuples whose first element is a renderer key. The
    first shape with at least one match wins and every item of the shelf is read with it.
    """

    for shape in shapes:
        items = extract_renderers(shelf, shape[0])
        if items:
            return shape, items
    return None


def parse_duration(text: Optional[str]) -> Optional[timedelta]:
    """Parse ``M:SS`` or ``H:MM:SS`` display text into a positive interval.

    Returns ``None`` for empty, malformed or zero durations.
    """

    if not text:
        return None

    parts = text.strip().split(":")
    if len(parts) == 2:
        parts.insert(0, "0")
    if len(parts) != 3 or not all(_DURATION_PART.fullmatch(part) for part in parts):
        return None

    hours, minutes, seconds = (int(part) for part in parts)
    if minutes > 59 or seconds > 59:
        return None

    duration = timedelta(hours=hours, minutes=minutes, seconds=seconds)
    return duration if duration > timedelta(0) else None


__all__ = [
    "COMPACT_STATION_RENDERER",
    "COMPACT_VIDEO_RENDERER",
    "GRID_PLAYLIST_RENDERER",
    "GRID_VIDEO_RENDERER",
    "ITEM_SECTION_RENDERER",
    "MUSIC_RESPONSIVE_LIST_ITEM_RENDERER",
    "PLAYLIST_PANEL_VIDEO_RENDERER",
    "PLAYLIST_RENDERER",
    "PLAYLIST_VIDEO_RENDERER",
    "SHELF_RENDERER",
    "VIDEO_RENDERER",
    "extract_continuation_token",
    "extract_playlist_title",
    "extract_renderers",
    "extract_search_result_contents",
    "extract_shelf_renderers",
    "extract_shelf_title",
    "extract_stream_data",
    "extract_visitor_data",
    "parse_duration",
    "probe_shelf_items",
]
