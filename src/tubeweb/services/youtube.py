"""Query facade: one coroutine per YouTube / YouTube Music use case."""

from __future__ import annotations

import asyncio
from types import TracebackType
from typing import Any, Callable, Dict, List, Optional, Type, Union

from rich.console import Console

from tubeweb.config.settings import Settings, get_settings
from tubeweb.models.content import HomePageSection, Page
from tubeweb.models.search import MusicSearchFilter
from tubeweb.models.stream import StreamInfo
from tubeweb.models.video import Playlist, Video
from tubeweb.parsing.builders import (
    HOME_SHELF_SHAPES,
    SEARCH_RESULT_SHAPES,
    playlist_from_music_responsive_list_item_renderer,
    stream_info_from_format,
    video_from_compact_video_renderer,
    video_from_music_responsive_list_item_renderer,
    video_from_playlist_panel_video_renderer,
    video_from_video_renderer,
)
from tubeweb.parsing.extractors import (
    COMPACT_VIDEO_RENDERER,
    MUSIC_RESPONSIVE_LIST_ITEM_RENDERER,
    PLAYLIST_PANEL_VIDEO_RENDERER,
    PLAYLIST_VIDEO_RENDERER,
    extract_playlist_title,
    extract_renderers,
    extract_search_result_contents,
    extract_shelf_renderers,
    extract_shelf_title,
    extract_stream_data,
    probe_shelf_items,
)
from tubeweb.services.network import (
    BROWSE_ENDPOINT,
    NEXT_ENDPOINT,
    PLAYER_ENDPOINT,
    SEARCH_ENDPOINT,
    JsonDocument,
    NetworkClient,
)
from tubeweb.services.pagination import DescribePage, FetchPage, PageStrategy, PaginatedResults


PLAYLIST_BROWSE_PREFIX = "VL"
WATCH_PLAYLIST_PREFIX = "RDAMVM"

RendererBuilder = Callable[[Any], Optional[Union[Video, Playlist]]]


def _without_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _page_from_renderers(
    document: JsonDocument,
    page_number: int,
    renderer_key: str,
    build: RendererBuilder,
) -> Page:
    items = [build(renderer) for renderer in extract_renderers(document, renderer_key)]
    return Page(page_number=page_number, content_items=[item for item in items if item is not None])


class YouTubeService:
    """Search and browse YouTube and YouTube Music through the Innertube web API.

    Every paginated operation returns a :class:`PaginatedResults` whose first page has
    already been fetched.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        network: Optional[NetworkClient] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._console = console or Console(stderr=True, quiet=not self._settings.verbose)
        self._owns_network = network is None
        self._network = network or NetworkClient(settings=self._settings, console=self._console)

    async def __aenter__(self) -> "YouTubeService":
        return self

    async def __aexit__(
        self,
        _exc_type: Optional[Type[BaseException]],
        _exc_val: Optional[BaseException],
        _exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_network:
            await self._network.aclose()

    # ------------------------------------------------------------------ #
    # Search                                                             #
    # ------------------------------------------------------------------ #
    async def search(self, query: str, *, cancel_event: Optional[asyncio.Event] = None) -> PaginatedResults:
        """Search YouTube for videos and playlists matching ``query``."""

        url = self._settings.endpoint_url(SEARCH_ENDPOINT)

        async def fetch(
            continuation_token: Optional[str],
            visitor_data: Optional[str],
            event: Optional[asyncio.Event],
        ) -> Optional[JsonDocument]:
            payload = _without_none({"query": query, "continuation": continuation_token})
            return await self._network.post_json(url, payload, cancel_event=event)

        def parse(document: JsonDocument, page_number: int) -> Page:
            contents = extract_search_result_contents(document, self._settings.section_policy) or []
            items: List[Union[Video, Playlist]] = []
            for entry in contents:
                if not isinstance(entry, dict):
                    continue
                for renderer_key, build in SEARCH_RESULT_SHAPES.items():
                    if renderer_key in entry:
                        item = build(entry[renderer_key])
                        if item is not None:
                            items.append(item)
                        break
            return Page(page_number=page_number, content_items=items)

        return await self._start(fetch, parse, cancel_event)

    async def search_music(
        self,
        query: str,
        search_filter: MusicSearchFilter,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResults:
        """Search YouTube Music within one content category.

        Song searches yield videos; album and playlist searches yield playlists.
        """

        url = self._settings.endpoint_url(SEARCH_ENDPOINT, music=True)

        async def fetch(
            continuation_token: Optional[str],
            visitor_data: Optional[str],
            event: Optional[asyncio.Event],
        ) -> Optional[JsonDocument]:
            payload = _without_none(
                {"query": query, "continuation": continuation_token, "params": search_filter.params}
            )
            return await self._network.post_json(url, payload, cancel_event=event)

        build: RendererBuilder = (
            playlist_from_music_responsive_list_item_renderer
            if search_filter.yields_playlists
            else video_from_music_responsive_list_item_renderer
        )

        def parse(document: JsonDocument, page_number: int) -> Page:
            return _page_from_renderers(document, page_number, MUSIC_RESPONSIVE_LIST_ITEM_RENDERER, build)

        return await self._start(fetch, parse, cancel_event)

    # ------------------------------------------------------------------ #
    # Video-centric listings                                             #
    # ------------------------------------------------------------------ #
    async def get_related_videos(
        self,
        video_id: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResults:
        """Videos suggested alongside ``video_id`` on its watch page."""

        url = self._settings.endpoint_url(NEXT_ENDPOINT)

        async def fetch(
            continuation_token: Optional[str],
            visitor_data: Optional[str],
            event: Optional[asyncio.Event],
        ) -> Optional[JsonDocument]:
            payload = _without_none({"videoId": video_id, "continuation": continuation_token})
            payload["context"] = {"client": _without_none({"visitorData": visitor_data})}
            return await self._network.post_json(url, payload, cancel_event=event)

        def parse(document: JsonDocument, page_number: int) -> Page:
            return _page_from_renderers(
                document, page_number, COMPACT_VIDEO_RENDERER, video_from_compact_video_renderer
            )

        return await self._start(fetch, parse, cancel_event)

    async def get_playlist_videos(
        self,
        playlist_id: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResults:
        """Videos of the playlist ``playlist_id`` in playlist order.

        The playlist title, when the upstream reports one, is available as ``results.title``.
        """

        url = self._settings.endpoint_url(BROWSE_ENDPOINT)

        async def fetch(
            continuation_token: Optional[str],
            visitor_data: Optional[str],
            event: Optional[asyncio.Event],
        ) -> Optional[JsonDocument]:
            payload = _without_none(
                {"browseId": PLAYLIST_BROWSE_PREFIX + playlist_id, "continuation": continuation_token}
            )
            payload["context"] = {"client": _without_none({"visitorData": visitor_data})}
            return await self._network.post_json(url, payload, cancel_event=event)

        def parse(document: JsonDocument, page_number: int) -> Page:
            return _page_from_renderers(document, page_number, PLAYLIST_VIDEO_RENDERER, video_from_video_renderer)

        return await self._start(fetch, parse, cancel_event, describe=extract_playlist_title)

    async def get_watch_playlist_videos(
        self,
        video_id: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResults:
        """A YouTube Music generated queue ("radio") of songs similar to ``video_id``."""

        url = self._settings.endpoint_url(NEXT_ENDPOINT, music=True)

        async def fetch(
            continuation_token: Optional[str],
            visitor_data: Optional[str],
            event: Optional[asyncio.Event],
        ) -> Optional[JsonDocument]:
            payload = _without_none(
                {
                    "enablePersistentPlaylistPanel": True,
                    "isAudioOnly": True,
                    "videoId": video_id,
                    "playlistId": WATCH_PLAYLIST_PREFIX + video_id,
                    "continuation": continuation_token,
                    "watchEndpointMusicSupportedConfigs": {
                        "watchEndpointMusicConfig": {
                            "hasPersistentPlaylistPanel": True,
                            "musicVideoType": "MUSIC_VIDEO_TYPE_OMV",
                        },
                    },
                }
            )
            return await self._network.post_json(url, payload, visitor_data=visitor_data, cancel_event=event)

        def parse(document: JsonDocument, page_number: int) -> Page:
            return _page_from_renderers(
                document, page_number, PLAYLIST_PANEL_VIDEO_RENDERER, video_from_playlist_panel_video_renderer
            )

        return await self._start(fetch, parse, cancel_event)

    # ------------------------------------------------------------------ #
    # Single-shot lookups                                                #
    # ------------------------------------------------------------------ #
    async def get_stream_info(
        self,
        video_id: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[StreamInfo]:
        """Every stream rendition of ``video_id`` that exposes a direct URL."""

        url = self._settings.endpoint_url(PLAYER_ENDPOINT)
        document = await self._network.post_json(url, {"videoId": video_id}, cancel_event=cancel_event)
        if document is None:
            return []

        streams = [stream_info_from_format(entry) for entry in extract_stream_data(document)]
        return [stream for stream in streams if stream is not None]

    async def get_home_page_sections(
        self,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[HomePageSection]:
        """Shelves of curated content from the YouTube Music channel page.

        Each shelf is read with the first item shape it contains; shelves without a title
        or without any valid item are left out.
        """

        url = self._settings.endpoint_url(BROWSE_ENDPOINT)
        payload = {"browseId": self._settings.music_channel_browse_id}
        document = await self._network.post_json(url, payload, cancel_event=cancel_event)
        if document is None:
            return []

        sections: List[HomePageSection] = []
        for shelf in extract_shelf_renderers(document):
            section_name = extract_shelf_title(shelf)
            if section_name is None:
                continue

            probed = probe_shelf_items(shelf, HOME_SHELF_SHAPES)
            if probed is None:
                continue
            shape, renderers = probed

            items = [shape.build(renderer) for renderer in renderers]
            content_items = [item for item in items if item is not None]
            if content_items:
                sections.append(HomePageSection(section_name=section_name, content_items=content_items))
        return sections

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #
    async def _start(
        self,
        fetch: FetchPage,
        parse: Callable[[JsonDocument, int], Page],
        cancel_event: Optional[asyncio.Event],
        *,
        describe: Optional[DescribePage] = None,
    ) -> PaginatedResults:
        results = PaginatedResults(
            PageStrategy(fetch=fetch, parse=parse, describe=describe),
            settings=self._settings,
            console=self._console,
        )
        await results.fetch_next_page(cancel_event)
        return results


__all__ = ["PLAYLIST_BROWSE_PREFIX", "WATCH_PLAYLIST_PREFIX", "YouTubeService"]
