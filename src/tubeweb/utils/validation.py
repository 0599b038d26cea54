"""Field extraction for YouTube watch and playlist URLs."""

from __future__ import annotations

import re


_VIDEO_ID_PATTERN = re.compile(r"[&?]v=([^&]*)", re.IGNORECASE)
_PLAYLIST_ID_PATTERN = re.compile(r"[&?]list=([^&]*)", re.IGNORECASE)


def _first_group(pattern: re.Pattern[str], url: str) -> str:
    match = pattern.search(url)
    return match.group(1) if match else ""


def get_video_id(url: str) -> str:
    """Return the ``v`` query value of ``url``, or an empty string when there is none."""

    return _first_group(_VIDEO_ID_PATTERN, url)


def get_playlist_id(url: str) -> str:
    """Return the ``list`` query value of ``url``, or an empty string when there is none."""

    return _first_group(_PLAYLIST_ID_PATTERN, url)


__all__ = ["get_playlist_id", "get_video_id"]
