"""Utility helpers shared across tubeweb modules."""

from tubeweb.utils.validation import get_playlist_id, get_video_id

__all__ = ["get_playlist_id", "get_video_id"]
