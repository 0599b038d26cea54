"""Domain models returned by tubeweb."""

from tubeweb.models.content import ContentItem, HomePageSection, Page
from tubeweb.models.search import MusicSearchFilter
from tubeweb.models.stream import StreamInfo
from tubeweb.models.thumbnails import Thumbnails
from tubeweb.models.video import Playlist, Video

__all__ = [
    "ContentItem",
    "HomePageSection",
    "MusicSearchFilter",
    "Page",
    "Playlist",
    "StreamInfo",
    "Thumbnails",
    "Video",
]
