"""HTTP transport for the Innertube web API."""

from __future__ import annotations

import asyncio
from types import TracebackType
from typing import Any, Dict, Mapping, Optional, Type

import httpx
from rich.console import Console

from tubeweb.config.settings import ClientContext, Settings, get_settings
from tubeweb.services.pagination import FetchCancelledError

JsonDocument = Dict[str, Any]

PLAYER_ENDPOINT = "player"
SEARCH_ENDPOINT = "search"
BROWSE_ENDPOINT = "browse"
NEXT_ENDPOINT = "next"


def merge_payload(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``overlay`` into a copy of ``base``.

    Nested mappings are merged key by key; any other value in ``overlay`` replaces the one
    in ``base``.
    """

    merged: Dict[str, Any] = dict(base)
    for key, value in overlay.items():
        existing = merged.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_payload(existing, value)
        else:
            merged[key] = value
    return merged


class NetworkClient:
    """Send POST requests to the upstream API and return parsed JSON documents.

    Any transport failure, non-success status or undecodable body is logged and mapped to
    ``None``; callers treat that as an empty page rather than an error. No retries are
    attempted.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._console = console or Console(stderr=True, quiet=not self._settings.verbose)
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self._settings.request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "NetworkClient":
        return self

    async def __aexit__(
        self,
        _exc_type: Optional[Type[BaseException]],
        _exc_val: Optional[BaseException],
        _exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""

        if self._owns_client:
            await self._http_client.aclose()

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #
    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        visitor_data: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[JsonDocument]:
        """POST ``payload`` merged with the client context for ``url``.

        Parameters
        ----------
        url:
            Full endpoint URL including API parameters.
        payload:
            Endpoint-specific request body. Its ``context.client`` entries are merged over
            the client context, not replaced by it.
        visitor_data:
            Session token sent as ``x-goog-visitor-id`` when known.
        cancel_event:
            Cooperative cancellation signal. Setting it before or during the request
            abandons the request and raises :class:`FetchCancelledError`.

        Returns
        -------
        dict or None
            The decoded response object, or ``None`` on any transport condition.
        """

        if cancel_event is not None and cancel_event.is_set():
            raise FetchCancelledError(f"Request to {url} cancelled before sending.")

        body = merge_payload(self.client_context_for(url).as_payload(), payload)
        headers = self.build_headers(url, visitor_data)

        self._console.log(f"POST {url}")
        try:
            response = await self._send(url, body, headers, cancel_event)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            self._console.log(f"[red]Request failed:[/red] {exc} (url={url})")
            return None

        try:
            document = response.json()
        except ValueError as exc:
            self._console.log(f"[red]Response was not valid JSON:[/red] {exc} (url={url})")
            return None

        if not isinstance(document, dict):
            self._console.log(f"[yellow]Unexpected response type {type(document).__name__}[/yellow] (url={url})")
            return None
        return document

    async def _send(
        self,
        url: str,
        body: Dict[str, Any],
        headers: Dict[str, str],
        cancel_event: Optional[asyncio.Event],
    ) -> httpx.Response:
        if cancel_event is None:
            return await self._http_client.post(url, json=body, headers=headers)

        request = asyncio.ensure_future(self._http_client.post(url, json=body, headers=headers))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({request, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not request.done():
                request.cancel()

        if request.cancelled() or not request.done():
            self._console.log(f"[yellow]Request cancelled in flight[/yellow] (url={url})")
            raise FetchCancelledError(f"Request to {url} cancelled while in flight.")
        return request.result()

    def client_context_for(self, url: str) -> ClientContext:
        """Pick the client identity: Android for the player, web or music web otherwise."""

        clients = self._settings.clients
        if f"/{PLAYER_ENDPOINT}" in url:
            return clients.android
        if self._settings.youtube_domain in url:
            return clients.web
        return clients.web_remix

    def build_headers(self, url: str, visitor_data: Optional[str] = None) -> Dict[str, str]:
        origin = self._settings.youtube_url if self._settings.youtube_domain in url else self._settings.youtube_music_url
        headers = {
            "accept": "*/*",
            "accept-encoding": "gzip, deflate",
            "content-type": "application/json",
            "origin": origin,
            "x-goog-authuser": "0",
            "user-agent": self._settings.user_agent,
        }
        if visitor_data:
            headers["x-goog-visitor-id"] = visitor_data
        return headers


__all__ = [
    "BROWSE_ENDPOINT",
    "JsonDocument",
    "NEXT_ENDPOINT",
    "NetworkClient",
    "PLAYER_ENDPOINT",
    "SEARCH_ENDPOINT",
    "merge_payload",
]
