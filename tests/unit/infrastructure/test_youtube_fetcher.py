"""Tests for YouTubeInfoFetcher."""

from __future__ import annotations

import httpx
import pytest
import respx

from ytresolve.domain.exceptions import (
    BadResponseError,
    TooManyRequestsError,
    TransportFailureError,
)
from ytresolve.infrastructure.youtube.fetcher import (
    YouTubeInfoFetcher,
    extract_player_url,
)

_INFO_URL = "https://www.youtube.com/get_video_info"
_WATCH_URL = "https://www.youtube.com/watch"


class TestExtractPlayerUrl:
    def test_relative_src_is_made_absolute(
        self, watch_page: str, player_url: str
    ) -> None:
        assert extract_player_url(watch_page, "https://www.youtube.com/") == player_url

    def test_query_string_kept(self) -> None:
        html = '<script src="https://cdn.example/yts/player-abc.js?v=2"></script>'
        assert (
            extract_player_url(html, "https://www.youtube.com/")
            == "https://cdn.example/yts/player-abc.js?v=2"
        )

    def test_single_quotes(self) -> None:
        html = "<script type='text/javascript' src='/yts/jsbin/player-en_US.js'>"
        assert (
            extract_player_url(html, "https://www.youtube.com/")
            == "https://www.youtube.com/yts/jsbin/player-en_US.js"
        )

    def test_no_player_tag(self) -> None:
        html = '<script src="/s/desktop/www-i18n.js"></script>'
        assert extract_player_url(html, "https://www.youtube.com/") is None


class TestFetch:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_returns_body_on_200(self) -> None:
        respx.get("https://www.youtube.com/x").respond(200, text="hello")
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            assert await fetcher.fetch("https://www.youtube.com/x") == "hello"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_429_raises_too_many_requests(self) -> None:
        respx.get("https://www.youtube.com/x").respond(429)
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            with pytest.raises(TooManyRequestsError) as exc_info:
                await fetcher.fetch("https://www.youtube.com/x")
        assert exc_info.value.status_code == 429

    @respx.mock
    @pytest.mark.asyncio()
    async def test_too_many_requests_is_a_bad_response(self) -> None:
        respx.get("https://www.youtube.com/x").respond(429)
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            with pytest.raises(BadResponseError):
                await fetcher.fetch("https://www.youtube.com/x")

    @pytest.mark.parametrize("status", [204, 301, 404, 500, 503])
    @respx.mock
    @pytest.mark.asyncio()
    async def test_non_200_raises_bad_response(self, status: int) -> None:
        respx.get("https://www.youtube.com/x").respond(status)
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            with pytest.raises(BadResponseError) as exc_info:
                await fetcher.fetch("https://www.youtube.com/x")
        assert exc_info.value.status_code == status
        assert not isinstance(exc_info.value, TooManyRequestsError)

    @respx.mock
    @pytest.mark.asyncio()
    async def test_connect_error_raises_transport_failure(self) -> None:
        respx.get("https://www.youtube.com/x").mock(
            side_effect=httpx.ConnectError("refused")
        )
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            with pytest.raises(TransportFailureError):
                await fetcher.fetch("https://www.youtube.com/x")

    @respx.mock
    @pytest.mark.asyncio()
    async def test_timeout_raises_transport_failure(self) -> None:
        respx.get("https://www.youtube.com/x").mock(
            side_effect=httpx.ReadTimeout("slow")
        )
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            with pytest.raises(TransportFailureError, match="timeout"):
                await fetcher.fetch("https://www.youtube.com/x")

    @respx.mock
    @pytest.mark.asyncio()
    async def test_redirect_loop_raises_transport_failure(self) -> None:
        url = "https://www.youtube.com/x"
        respx.get(url).respond(302, headers={"Location": url})
        async with httpx.AsyncClient(follow_redirects=True) as client:
            fetcher = YouTubeInfoFetcher(client)
            with pytest.raises(TransportFailureError):
                await fetcher.fetch(url)


class TestEndpoints:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_video_info_request_parameters(self) -> None:
        route = respx.get(_INFO_URL).respond(200, text="body")
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            assert await fetcher.fetch_video_info("abc") == "body"

        params = route.calls.last.request.url.params
        assert params["video_id"] == "abc"
        assert params["eurl"] == "https://youtube.googleapis.com/v/abc"
        assert params["html5"] == "1"
        assert params["c"] == "TVHTML5"
        assert params["cver"] == "6.20180913"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_custom_host(self) -> None:
        route = respx.get("https://yt.internal/get_video_info").respond(
            200, text="body"
        )
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client, host="yt.internal")
            await fetcher.fetch_video_info("abc")
        assert route.called

    @respx.mock
    @pytest.mark.asyncio()
    async def test_player_script_via_watch_page(
        self, watch_page: str, player_url: str, player_script: str
    ) -> None:
        watch = respx.get(_WATCH_URL).respond(200, text=watch_page)
        player = respx.get(player_url).respond(200, text=player_script)
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            script = await fetcher.fetch_player_script("abc")

        assert script == player_script
        assert watch.calls.last.request.url.params["v"] == "abc"
        assert player.call_count == 1

    @respx.mock
    @pytest.mark.asyncio()
    async def test_player_script_empty_without_player_tag(self) -> None:
        respx.get(_WATCH_URL).respond(200, text="<html></html>")
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            assert await fetcher.fetch_player_script("abc") == ""

    @respx.mock
    @pytest.mark.asyncio()
    async def test_watch_page_error_propagates(self) -> None:
        respx.get(_WATCH_URL).respond(503)
        async with httpx.AsyncClient() as client:
            fetcher = YouTubeInfoFetcher(client)
            with pytest.raises(BadResponseError):
                await fetcher.fetch_player_script("abc")
