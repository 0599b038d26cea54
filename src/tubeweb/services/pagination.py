"""Continuation-driven pagination over upstream result sets."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Mapping, Optional

from rich.console import Console

from tubeweb.config.settings import ContinuationPolicy, Settings, get_settings
from tubeweb.models.content import Page
from tubeweb.parsing.extractors import extract_continuation_token, extract_visitor_data


JsonDocument = Dict[str, Any]
FetchPage = Callable[[Optional[str], Optional[str], Optional[asyncio.Event]], Awaitable[Optional[JsonDocument]]]
ParsePage = Callable[[JsonDocument, int], Page]
DescribePage = Callable[[JsonDocument], Optional[str]]


class PaginationError(RuntimeError):
    """Base exception raised for pagination failures."""


class InvalidPageNumberError(PaginationError, ValueError):
    """Raised when a page number below 1 is requested."""


class FetchCancelledError(PaginationError):
    """Raised when a fetch is cancelled before or while its request is in flight."""


@dataclass(frozen=True, slots=True)
class PageStrategy:
    """How one endpoint fetches a raw page and turns it into a :class:`Page`.

    ``fetch`` receives the continuation token, the session (visitor) token and an optional
    cancellation event, and returns the decoded response or ``None`` when the transport
    produced nothing. ``parse`` receives that response and the page number to assign.
    ``describe``, when given, reads a title for the whole result set from a response.
    """

    fetch: FetchPage
    parse: ParsePage
    describe: Optional[DescribePage] = None


class PaginatedResults:
    """A lazily fetched, cached sequence of result pages.

    Pages are numbered from 1 in the order they are fetched. The end of the result set is
    detected solely by a response that carries no continuation token. Calls on one instance
    must be awaited one at a time; concurrent calls into the same session are not guarded
    and their outcome is undefined.
    """

    def __init__(
        self,
        strategy: PageStrategy,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        continuation_policy: Optional[ContinuationPolicy] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._console = console or Console(stderr=True, quiet=not self._settings.verbose)
        self._strategy = strategy
        self._continuation_policy = continuation_policy or self._settings.continuation_policy
        self._pages: Dict[int, Page] = {}
        self._current_page_number = 0
        self._all_pages_fetched = False
        self._continuation_token: Optional[str] = None
        self._visitor_data: Optional[str] = None
        self._title: Optional[str] = None

    # ------------------------------------------------------------------ #
    # State                                                              #
    # ------------------------------------------------------------------ #
    @property
    def current_page_number(self) -> int:
        """Number of the last stored page; 0 before the first successful fetch."""

        return self._current_page_number

    @property
    def current_page(self) -> Optional[Page]:
        return self._pages.get(self._current_page_number)

    @property
    def all_pages_fetched(self) -> bool:
        return self._all_pages_fetched

    @property
    def continuation_token(self) -> Optional[str]:
        return self._continuation_token

    @property
    def visitor_data(self) -> Optional[str]:
        return self._visitor_data

    @property
    def title(self) -> Optional[str]:
        """Title of the result set, taken from the first response that carries one."""

        return self._title

    @property
    def pages(self) -> Mapping[int, Page]:
        """Read-only view of every stored page keyed by page number."""

        return MappingProxyType(self._pages)

    # ------------------------------------------------------------------ #
    # Fetching                                                           #
    # ------------------------------------------------------------------ #
    async def fetch_next_page(self, cancel_event: Optional[asyncio.Event] = None) -> Page:
        """Fetch, parse and store the page after the current one.

        Once every page has been fetched this returns the current page without any network
        access. When the transport yields no document an empty page numbered as the next
        page is returned; it is not stored and the session state is left untouched.
        """

        if self._all_pages_fetched:
            return self._pages[self._current_page_number]

        document = await self._strategy.fetch(self._continuation_token, self._visitor_data, cancel_event)
        next_page_number = self._current_page_number + 1

        if document is None:
            self._console.log(f"[yellow]No response for page {next_page_number}; returning an empty page.[/yellow]")
            return Page(page_number=next_page_number)

        continuation_token = extract_continuation_token(document, self._continuation_policy)
        if continuation_token is not None:
            self._continuation_token = continuation_token
        else:
            self._all_pages_fetched = True
            self._console.log(f"No continuation token after page {next_page_number}; all pages fetched.")

        visitor_data = extract_visitor_data(document)
        if visitor_data is not None:
            self._visitor_data = visitor_data

        if self._title is None and self._strategy.describe is not None:
            self._title = self._strategy.describe(document)

        self._current_page_number = next_page_number
        page = self._strategy.parse(document, next_page_number)
        self._pages[next_page_number] = page
        return page

    async def fetch_page(self, page_number: int, cancel_event: Optional[asyncio.Event] = None) -> Page:
        """Return page ``page_number``, fetching forward from the current page as needed.

        Already fetched pages come from the cache. A request past the end of an exhausted
        result set returns the last page. Fetching stops early, returning the latest page,
        when a fetch fails to advance the session or ``cancel_event`` is set.

        Raises
        ------
        InvalidPageNumberError
            If ``page_number`` is lower than 1.
        FetchCancelledError
            If the transport abandons a request because ``cancel_event`` was set while it
            was in flight. Pages stored before the cancellation are kept.
        """

        if page_number < 1:
            raise InvalidPageNumberError(f"Page number must be 1 or greater, got {page_number}.")

        if page_number <= self._current_page_number:
            return self._pages[page_number]

        if self._all_pages_fetched:
            return self._pages[self._current_page_number]

        page = await self.fetch_next_page(cancel_event)

        while self._current_page_number < page_number and not self._all_pages_fetched:
            if cancel_event is not None and cancel_event.is_set():
                self._console.log(f"[yellow]Fetch of page {page_number} cancelled at page {page.page_number}.[/yellow]")
                break

            previous_page_number = self._current_page_number
            page = await self.fetch_next_page(cancel_event)

            if self._current_page_number == previous_page_number:
                self._console.log(f"[yellow]Pagination stalled at page {previous_page_number}.[/yellow]")
                return page

        return page

    async def iter_pages(self, cancel_event: Optional[asyncio.Event] = None) -> AsyncIterator[Page]:
        """Yield stored pages from page 1 onwards until the result set is exhausted.

        Iteration also ends when fetching stalls or is cancelled. Transient empty pages are
        never yielded.
        """

        page_number = 1
        while True:
            page = await self.fetch_page(page_number, cancel_event)
            if page_number > self._current_page_number:
                return
            yield page
            if self._all_pages_fetched and page_number >= self._current_page_number:
                return
            page_number += 1


__all__ = [
    "DescribePage",
    "FetchCancelledError",
    "FetchPage",
    "InvalidPageNumberError",
    "PageStrategy",
    "PaginatedResults",
    "PaginationError",
    "ParsePage",
]
