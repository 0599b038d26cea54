"""Client library for the YouTube and YouTube Music Innertube web API."""

from tubeweb.models import (
    ContentItem,
    HomePageSection,
    MusicSearchFilter,
    Page,
    Playlist,
    StreamInfo,
    Thumbnails,
    Video,
)
from tubeweb.services import (
    FetchCancelledError,
    InvalidPageNumberError,
    NetworkClient,
    PaginatedResults,
    PaginationError,
    YouTubeService,
)
from tubeweb.utils import get_playlist_id, get_video_id

__version__ = "0.1.0"

__all__ = [
    "ContentItem",
    "FetchCancelledError",
    "HomePageSection",
    "InvalidPageNumberError",
    "MusicSearchFilter",
    "NetworkClient",
    "Page",
    "PaginatedResults",
    "PaginationError",
    "Playlist",
    "StreamInfo",
    "Thumbnails",
    "Video",
    "YouTubeService",
    "get_playlist_id",
    "get_video_id",
]
