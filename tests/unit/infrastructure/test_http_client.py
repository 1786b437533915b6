"""Tests for the shared HTTP client factory."""

from __future__ import annotations

import httpx
import pytest
import respx

from ytresolve.infrastructure.common import create_http_client
from ytresolve.infrastructure.config import AppConfig


class TestCreateHttpClient:
    @pytest.mark.asyncio()
    async def test_timeout_and_user_agent(self) -> None:
        config = AppConfig(http_timeout_seconds=7.5, http_user_agent="UA/1")
        async with create_http_client(config) as client:
            assert client.timeout == httpx.Timeout(7.5)
            assert client.headers["User-Agent"] == "UA/1"
            assert client.follow_redirects is True

    @respx.mock
    @pytest.mark.asyncio()
    async def test_user_agent_sent(self) -> None:
        route = respx.get("https://example.com/").respond(200)
        config = AppConfig(http_user_agent="UA/2")
        async with create_http_client(config) as client:
            await client.get("https://example.com/")
        assert route.calls.last.request.headers["User-Agent"] == "UA/2"

    @pytest.mark.asyncio()
    async def test_verify_tls_enabled(self) -> None:
        config = AppConfig(http_verify_tls=True)
        async with create_http_client(config) as client:
            assert isinstance(client, httpx.AsyncClient)
