"""Tests for the HTTP transport."""

import asyncio
from typing import Any, Callable

import httpx
import pytest
from rich.console import Console

from tubeweb.config.settings import Settings
from tubeweb.services.network import NetworkClient, merge_payload
from tubeweb.services.pagination import FetchCancelledError

MakeNetwork = Callable[..., NetworkClient]
BodyOf = Callable[[httpx.Request], dict[str, Any]]


@pytest.mark.unit
class TestMergePayload:
    @staticmethod
    def test_nested_mappings_merge_and_scalars_replace() -> None:
        base = {"context": {"client": {"clientName": "WEB", "clientVersion": "1"}}, "keep": 1}
        overlay = {"context": {"client": {"visitorData": "abc"}}, "keep": 2, "query": "q"}

        merged = merge_payload(base, overlay)

        assert merged == {
            "context": {"client": {"clientName": "WEB", "clientVersion": "1", "visitorData": "abc"}},
            "keep": 2,
            "query": "q",
        }
        assert base["context"]["client"] == {"clientName": "WEB", "clientVersion": "1"}


@pytest.mark.unit
class TestClientSelection:
    @staticmethod
    def test_context_by_url(settings: Settings, make_network: MakeNetwork) -> None:
        network = make_network(lambda request: httpx.Response(200, json={}))

        assert network.client_context_for(settings.endpoint_url("player")).client_name == "ANDROID"
        assert network.client_context_for(settings.endpoint_url("search")).client_name == "WEB"
        assert network.client_context_for(settings.endpoint_url("search", music=True)).client_name == "WEB_REMIX"

    @staticmethod
    def test_headers(settings: Settings, make_network: MakeNetwork) -> None:
        network = make_network(lambda request: httpx.Response(200, json={}))

        web_headers = network.build_headers(settings.endpoint_url("browse"))
        music_headers = network.build_headers(settings.endpoint_url("next", music=True), "visitor-123")

        assert web_headers["origin"] == "https://www.youtube.com"
        assert web_headers["content-type"] == "application/json"
        assert web_headers["x-goog-authuser"] == "0"
        assert "x-goog-visitor-id" not in web_headers
        assert music_headers["origin"] == "https://music.youtube.com"
        assert music_headers["x-goog-visitor-id"] == "visitor-123"


@pytest.mark.unit
class TestPostJson:
    @pytest.mark.asyncio
    async def test_sends_merged_body_and_returns_document(
        self, settings: Settings, make_network: MakeNetwork, body_of: BodyOf
    ) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"responseContext": {"visitorData": "v"}})

        async with make_network(handler) as network:
            document = await network.post_json(
                settings.endpoint_url("next"),
                {"videoId": "abc", "context": {"client": {"visitorData": "v0"}}},
                visitor_data="v0",
            )

        assert document == {"responseContext": {"visitorData": "v"}}
        body = body_of(seen[0])
        assert body["videoId"] == "abc"
        assert body["context"]["client"] == {"clientName": "WEB", "clientVersion": "2.20230928.04.00", "visitorData": "v0"}
        assert seen[0].method == "POST"
        assert seen[0].url.params["prettyPrint"] == "false"
        assert seen[0].headers["x-goog-visitor-id"] == "v0"

    @pytest.mark.asyncio
    async def test_error_status_maps_to_none(self, settings: Settings, make_network: MakeNetwork, console: Console) -> None:
        async with make_network(lambda request: httpx.Response(500, text="boom")) as network:
            document = await network.post_json(settings.endpoint_url("search"), {"query": "q"})

        assert document is None
        assert "Request failed" in console.export_text()

    @pytest.mark.asyncio
    async def test_invalid_json_maps_to_none(self, settings: Settings, make_network: MakeNetwork) -> None:
        async with make_network(lambda request: httpx.Response(200, text="<html>")) as network:
            assert await network.post_json(settings.endpoint_url("search"), {"query": "q"}) is None

    @pytest.mark.asyncio
    async def test_non_object_json_maps_to_none(self, settings: Settings, make_network: MakeNetwork) -> None:
        async with make_network(lambda request: httpx.Response(200, json=[1, 2])) as network:
            assert await network.post_json(settings.endpoint_url("search"), {"query": "q"}) is None

    @pytest.mark.asyncio
    async def test_transport_error_maps_to_none(self, settings: Settings, make_network: MakeNetwork) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        async with make_network(handler) as network:
            assert await network.post_json(settings.endpoint_url("search"), {"query": "q"}) is None

    @pytest.mark.asyncio
    async def test_cancelled_before_sending(self, settings: Settings, make_network: MakeNetwork) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        event = asyncio.Event()
        event.set()

        async with make_network(handler) as network:
            with pytest.raises(FetchCancelledError):
                await network.post_json(settings.endpoint_url("search"), {"query": "q"}, cancel_event=event)

        assert calls == []

    @pytest.mark.asyncio
    async def test_cancelled_while_in_flight(
        self, settings: Settings, make_network: MakeNetwork, console: Console
    ) -> None:
        async def slow_handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={"ok": True})

        event = asyncio.Event()
        asyncio.get_running_loop().call_later(0.05, event.set)

        async with make_network(slow_handler) as network:
            with pytest.raises(FetchCancelledError):
                await asyncio.wait_for(
                    network.post_json(settings.endpoint_url("search"), {"query": "q"}, cancel_event=event),
                    timeout=2,
                )

        assert "cancelled in flight" in console.export_text()

    @pytest.mark.asyncio
    async def test_unset_event_does_not_interfere(self, settings: Settings, make_network: MakeNetwork) -> None:
        async with make_network(lambda request: httpx.Response(200, json={"ok": True})) as network:
            document = await network.post_json(
                settings.endpoint_url("search"), {"query": "q"}, cancel_event=asyncio.Event()
            )

        assert document == {"ok": True}
