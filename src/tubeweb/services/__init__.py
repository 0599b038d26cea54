"""Service layer for tubeweb: transport, pagination and the query facade."""

from tubeweb.services.network import NetworkClient
from tubeweb.services.pagination import (
    FetchCancelledError,
    InvalidPageNumberError,
    PageStrategy,
    PaginatedResults,
    PaginationError,
)
from tubeweb.services.youtube import YouTubeService

__all__ = [
    "FetchCancelledError",
    "InvalidPageNumberError",
    "NetworkClient",
    "PageStrategy",
    "PaginatedResults",
    "PaginationError",
    "YouTubeService",
]
