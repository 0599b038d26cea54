"""CLI commands for searching and browsing YouTube and YouTube Music."""

from __future__ import annotations

import asyncio
import json
from datetime import timedelta
from typing import Awaitable, Callable, Iterable, Optional, Sequence

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tubeweb.models.content import HomePageSection, Page
from tubeweb.models.search import MusicSearchFilter
from tubeweb.models.stream import StreamInfo
from tubeweb.models.video import Playlist, Video
from tubeweb.services.pagination import PaginatedResults
from tubeweb.services.youtube import YouTubeService
from tubeweb.utils.validation import get_playlist_id, get_video_id

ServiceFactory = Callable[[], YouTubeService]


class ExitCode:
    """Mapping of meaningful CLI exit codes."""

    SUCCESS = 0
    INVALID_INPUT = 1
    NO_RESULTS = 2


def register(app: typer.Typer, console: Console, service_factory: ServiceFactory) -> None:
    """Register the browsing commands."""

    def run_paginated(
        open_results: Callable[[YouTubeService], Awaitable[PaginatedResults]],
        *,
        title: str,
        pages: int,
        json_output: bool,
    ) -> None:
        async def _collect() -> tuple[list[Page], Optional[str]]:
            async with service_factory() as service:
                results = await open_results(service)
                await results.fetch_page(pages)
                collected = [page for page in results.pages.values() if page.page_number <= pages]
                return collected, results.title

        collected, result_title = asyncio.run(_collect())
        _emit_pages(console, collected, title=result_title or title, json_output=json_output)

    @app.command("search")
    def search(
        query: str = typer.Argument(..., help="Search terms"),
        json_output: bool = typer.Option(False, "--json", help="Print the first page as JSON and exit"),
    ) -> None:
        """Search YouTube, paging through results on request."""

        if not query.strip():
            console.print("[red]Error:[/red] Query must not be empty.")
            raise typer.Exit(code=ExitCode.INVALID_INPUT)

        if json_output:
            run_paginated(lambda service: service.search(query), title=query, pages=1, json_output=True)
            return

        async def _browse() -> int:
            async with service_factory() as service:
                results = await service.search(query)
                shown = 0
                while True:
                    page = results.current_page
                    if page is None or page.page_number == shown:
                        break
                    _render_items(console, page.content_items, title=f"{query} (page {page.page_number})")
                    shown = page.page_number
                    if results.all_pages_fetched or not typer.confirm("Fetch another page?", default=False):
                        break
                    await results.fetch_next_page()
                return shown

        if asyncio.run(_browse()) == 0:
            console.print("[yellow]No results.[/yellow]")
            raise typer.Exit(code=ExitCode.NO_RESULTS)

    @app.command("music")
    def music(
        query: str = typer.Argument(..., help="Search terms"),
        search_filter: MusicSearchFilter = typer.Option(
            MusicSearchFilter.SONGS, "--filter", case_sensitive=False, help="Music content category"
        ),
        pages: int = typer.Option(1, "--pages", min=1, help="Number of pages to fetch"),
        json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    ) -> None:
        """Search YouTube Music for songs, albums or playlists."""

        run_paginated(
            lambda service: service.search_music(query, search_filter),
            title=f"{query} ({search_filter.value})",
            pages=pages,
            json_output=json_output,
        )

    @app.command("related")
    def related(
        url: str = typer.Argument(..., help="Watch URL or video id"),
        pages: int = typer.Option(1, "--pages", min=1, help="Number of pages to fetch"),
        json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    ) -> None:
        """List videos related to a video."""

        video_id = _resolve_id(console, url, get_video_id)
        run_paginated(
            lambda service: service.get_related_videos(video_id),
            title=f"Related to {video_id}",
            pages=pages,
            json_output=json_output,
        )

    @app.command("playlist")
    def playlist(
        url: str = typer.Argument(..., help="Playlist URL or playlist id"),
        pages: int = typer.Option(1, "--pages", min=1, help="Number of pages to fetch"),
        json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    ) -> None:
        """List the videos of a playlist."""

        playlist_id = _resolve_id(console, url, get_playlist_id)
        run_paginated(
            lambda service: service.get_playlist_videos(playlist_id),
            title=f"Playlist {playlist_id}",
            pages=pages,
            json_output=json_output,
        )

    @app.command("radio")
    def radio(
        url: str = typer.Argument(..., help="Watch URL or video id"),
        pages: int = typer.Option(1, "--pages", min=1, help="Number of pages to fetch"),
        json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    ) -> None:
        """List the YouTube Music queue generated from a song."""

        video_id = _resolve_id(console, url, get_video_id)
        run_paginated(
            lambda service: service.get_watch_playlist_videos(video_id),
            title=f"Radio for {video_id}",
            pages=pages,
            json_output=json_output,
        )

    @app.command("streams")
    def streams(
        url: str = typer.Argument(..., help="Watch URL or video id"),
        audio_only: bool = typer.Option(False, "--audio-only", help="Only list audio streams"),
        json_output: bool = typer.Option(False, "--json", help="Output streams as JSON"),
    ) -> None:
        """List the stream renditions of a video."""

        video_id = _resolve_id(console, url, get_video_id)

        async def _fetch() -> list[StreamInfo]:
            async with service_factory() as service:
                return await service.get_stream_info(video_id)

        stream_infos = [stream for stream in asyncio.run(_fetch()) if stream.is_audio or not audio_only]

        if json_output:
            typer.echo(json.dumps([stream.model_dump(mode="json") for stream in stream_infos], indent=2))
        else:
            _render_streams(console, stream_infos)

        if not stream_infos:
            raise typer.Exit(code=ExitCode.NO_RESULTS)

    @app.command("home")
    def home(
        json_output: bool = typer.Option(False, "--json", help="Output sections as JSON"),
    ) -> None:
        """Show the curated sections of the YouTube Music home page."""

        async def _fetch() -> list[HomePageSection]:
            async with service_factory() as service:
                return await service.get_home_page_sections()

        sections = asyncio.run(_fetch())

        if json_output:
            typer.echo(
                json.dumps([section.model_dump(mode="json") for section in sections], ensure_ascii=False, indent=2)
            )
        else:
            for section in sections:
                _render_items(console, section.content_items, title=section.section_name)

        if not sections:
            if not json_output:
                console.print("[yellow]No home page sections found.[/yellow]")
            raise typer.Exit(code=ExitCode.NO_RESULTS)


def _resolve_id(console: Console, value: str, extract: Callable[[str], str]) -> str:
    """Take the id from a URL query, or the argument itself when it is a bare id."""

    stripped = value.strip()
    extracted = extract(stripped)
    if extracted:
        return extracted
    if stripped and "/" not in stripped and "?" not in stripped and "=" not in stripped:
        return stripped

    console.print(f"[red]Error:[/red] Could not find an id in {value!r}.")
    raise typer.Exit(code=ExitCode.INVALID_INPUT)


def _emit_pages(console: Console, pages: Sequence[Page], *, title: str, json_output: bool) -> None:
    has_items = any(page.content_items for page in pages)

    if json_output:
        typer.echo(json.dumps([page.model_dump(mode="json") for page in pages], ensure_ascii=False, indent=2))
    else:
        for page in pages:
            _render_items(console, page.content_items, title=f"{title} (page {page.page_number})")
        if not has_items:
            console.print("[yellow]No results.[/yellow]")

    if not has_items:
        raise typer.Exit(code=ExitCode.NO_RESULTS)


def _format_duration(duration: timedelta) -> str:
    total = int(duration.total_seconds())
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def _render_items(console: Console, items: Iterable[Video | Playlist], *, title: str) -> None:
    table = Table(title=title)
    table.add_column("Type")
    table.add_column("Title", overflow="fold")
    table.add_column("Author")
    table.add_column("Length")
    table.add_column("URL", overflow="fold")

    for item in items:
        if isinstance(item, Video):
            table.add_row("video", item.title, item.author, _format_duration(item.duration), item.url)
        else:
            length = f"{item.video_count} videos" if item.video_count else ""
            table.add_row("playlist", item.title, item.author or "", length, item.url)

    console.print(table)


def _render_streams(console: Console, stream_infos: Sequence[StreamInfo]) -> None:
    if not stream_infos:
        console.print(Panel.fit("No streams with a direct URL.", border_style="yellow"))
        return

    table = Table(title="Streams")
    table.add_column("MIME type")
    table.add_column("Bit rate", justify="right")
    table.add_column("URL", overflow="fold")
    for stream in stream_infos:
        table.add_row(stream.mime_type, f"{stream.bit_rate:,}", stream.url)
    console.print(table)


__all__ = ["ExitCode", "ServiceFactory", "register"]
