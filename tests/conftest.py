"""Shared pytest fixtures for tubeweb tests."""

from __future__ import annotations

import io
import json
from typing import Any, Callable, Optional

import httpx
import pytest
from rich.console import Console

from tubeweb.config.settings import Settings, get_settings
from tubeweb.services.network import NetworkClient
from tubeweb.services.youtube import YouTubeService

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of the settings under test."""

    for name in (
        "TUBEWEB_YOUTUBE_URL",
        "TUBEWEB_YOUTUBE_MUSIC_URL",
        "TUBEWEB_CONTINUATION_POLICY",
        "TUBEWEB_SECTION_POLICY",
        "TUBEWEB_VERBOSE",
        "TUBEWEB_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def console() -> Console:
    """A console that records output into memory instead of a terminal."""

    return Console(file=io.StringIO(), width=200, record=True)


@pytest.fixture
def make_network(settings: Settings, console: Console) -> Callable[[Handler], NetworkClient]:
    def factory(handler: Handler) -> NetworkClient:
        return NetworkClient(settings=settings, console=console, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def make_service(
    settings: Settings,
    console: Console,
    make_network: Callable[[Handler], NetworkClient],
) -> Callable[[Handler], YouTubeService]:
    def factory(handler: Handler) -> YouTubeService:
        return YouTubeService(settings=settings, console=console, network=make_network(handler))

    return factory


def request_body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content)


@pytest.fixture
def body_of() -> Callable[[httpx.Request], dict[str, Any]]:
    return request_body


# ---------------------------------------------------------------------- #
# Renderer payloads                                                      #
# ---------------------------------------------------------------------- #
def _runs(*texts: str) -> dict[str, Any]:
    return {"runs": [{"text": text} for text in texts]}


def _overlay(duration: str) -> list[dict[str, Any]]:
    return [{"thumbnailOverlayTimeStatusRenderer": {"text": {"simpleText": duration}}}]


@pytest.fixture
def runs() -> Callable[..., dict[str, Any]]:
    return _runs


@pytest.fixture
def video_renderer() -> Callable[..., dict[str, Any]]:
    def build(
        video_id: str = "dQw4w9WgXcQ",
        title: str = "Never Gonna Give You Up",
        author: str = "Rick Astley",
        duration: Optional[str] = "3:33",
    ) -> dict[str, Any]:
        renderer: dict[str, Any] = {
            "videoId": video_id,
            "title": _runs(title),
            "longBylineText": _runs(author),
        }
        if duration is not None:
            renderer["thumbnailOverlays"] = _overlay(duration)
        return renderer

    return build


@pytest.fixture
def compact_video_renderer() -> Callable[..., dict[str, Any]]:
    def build(video_id: str = "yPYZpwSpKmA", title: str = "Together Forever", author: str = "Rick Astley") -> dict[str, Any]:
        return {
            "videoId": video_id,
            "title": {"simpleText": title},
            "longBylineText": _runs(author),
            "lengthText": {"simpleText": "3:25"},
        }

    return build


@pytest.fixture
def playlist_panel_video_renderer() -> Callable[..., dict[str, Any]]:
    def build(
        video_id: str = "lXgkuM2NhYI",
        byline: tuple[str, ...] = ("a-ha", " • ", "Hunting High and Low", " • ", "1985"),
    ) -> dict[str, Any]:
        return {
            "videoId": video_id,
            "title": _runs("Take On Me"),
            "longBylineText": _runs(*byline),
            "lengthText": _runs("3:46"),
        }

    return build


@pytest.fixture
def music_item_renderer() -> Callable[..., dict[str, Any]]:
    """``musicResponsiveListItemRenderer`` with a title column and a subtitle column."""

    def build(
        title: str,
        subtitle: tuple[str, ...],
        *,
        video_id: Optional[str] = None,
        playlist_id: Optional[str] = None,
        thumbnail_urls: tuple[str, ...] = (),
    ) -> dict[str, Any]:
        renderer: dict[str, Any] = {
            "flexColumns": [
                {"musicResponsiveListItemFlexColumnRenderer": {"text": _runs(title)}},
                {"musicResponsiveListItemFlexColumnRenderer": {"text": _runs(*subtitle)}},
            ],
            "thumbnail": {
                "musicThumbnailRenderer": {"thumbnail": {"thumbnails": [{"url": url} for url in thumbnail_urls]}}
            },
        }
        if video_id is not None:
            renderer["playlistItemData"] = {"videoId": video_id}
        if playlist_id is not None:
            renderer["overlay"] = {
                "musicItemThumbnailOverlayRenderer": {
                    "content": {
                        "musicPlayButtonRenderer": {
                            "playNavigationEndpoint": {"watchPlaylistEndpoint": {"playlistId": playlist_id}}
                        }
                    }
                }
            }
        return renderer

    return build


@pytest.fixture
def grid_video_renderer() -> Callable[..., dict[str, Any]]:
    def build(video_id: str = "fJ9rUzIMcZQ", title: str = "Bohemian Rhapsody") -> dict[str, Any]:
        return {
            "videoId": video_id,
            "title": {"simpleText": title},
            "shortBylineText": _runs("Queen"),
            "thumbnailOverlays": _overlay("5:59"),
        }

    return build


@pytest.fixture
def compact_station_renderer() -> Callable[..., dict[str, Any]]:
    def build(playlist_id: str = "RDCLAK5uy_station", description: Optional[str] = "Upbeat pop hits") -> dict[str, Any]:
        renderer: dict[str, Any] = {
            "title": {"simpleText": "Pop Mix"},
            "videoCountText": _runs("50", " songs"),
            "navigationEndpoint": {"watchPlaylistEndpoint": {"playlistId": playlist_id}},
            "thumbnail": {
                "thumbnails": [
                    {"url": "https://lh3.example.com/low"},
                    {"url": "https://lh3.example.com/medium"},
                    {"url": "https://lh3.example.com/high"},
                ]
            },
        }
        if description is not None:
            renderer["description"] = {"simpleText": description}
        return renderer

    return build


@pytest.fixture
def grid_playlist_renderer() -> Callable[..., dict[str, Any]]:
    def build(playlist_id: str = "PLgrid", video_count: str = "12") -> dict[str, Any]:
        return {
            "playlistId": playlist_id,
            "title": _runs("Classic Rock"),
            "shortBylineText": _runs("YouTube Music"),
            "videoCountText": _runs(video_count, " videos"),
            "navigationEndpoint": {"watchEndpoint": {"videoId": "fJ9rUzIMcZQ", "playlistId": playlist_id}},
        }

    return build


@pytest.fixture
def playlist_renderer() -> Callable[..., dict[str, Any]]:
    def build(
        playlist_id: str = "PLsearch",
        thumbnail_url: str = "https://i.ytimg.com/vi/kXYiU_JCYtU/hqdefault.jpg?sqp=abc",
    ) -> dict[str, Any]:
        return {
            "playlistId": playlist_id,
            "title": {"simpleText": "Linkin Park Essentials"},
            "shortBylineText": _runs("Linkin Park"),
            "videoCount": "42",
            "thumbnails": [{"thumbnails": [{"url": thumbnail_url}]}],
        }

    return build
