"""Search options for the music catalogue."""

from __future__ import annotations

from enum import Enum


class MusicSearchFilter(str, Enum):
    """Content category for YouTube Music searches."""

    ALBUMS = "albums"
    FEATURED_PLAYLISTS = "featured_playlists"
    COMMUNITY_PLAYLISTS = "community_playlists"
    SONGS = "songs"

    @property
    def params(self) -> str:
        """Opaque ``params`` blob the search endpoint expects for this category."""

        return _FILTER_PARAMS[self]

    @property
    def yields_playlists(self) -> bool:
        return self is not MusicSearchFilter.SONGS


_FILTER_PARAMS = {
    MusicSearchFilter.ALBUMS: "EgWKAQIYAWoMEA4QChADEAQQCRAF",
    MusicSearchFilter.FEATURED_PLAYLISTS: "EgeKAQQoADgBagwQDhAKEAMQBBAJEAU%3D",
    MusicSearchFilter.COMMUNITY_PLAYLISTS: "EgeKAQQoAEABagwQDhAKEAMQBBAJEAU%3D",
    MusicSearchFilter.SONGS: "EgWKAQIIAWoMEA4QChADEAQQCRAF",
}


__all__ = ["MusicSearchFilter"]
