"""Composition root: wires handlers from configuration."""

from __future__ import annotations

import httpx

from ytresolve.infrastructure.config.schema import AppConfig
from ytresolve.infrastructure.handlers import HandlerRegistry
from ytresolve.infrastructure.youtube import YouTubeHandler


def build_registry(config: AppConfig, http_client: httpx.AsyncClient) -> HandlerRegistry:
    """Create the handler registry backed by *http_client*."""
    return HandlerRegistry(
        handlers=[
            YouTubeHandler(
                http_client,
                config=config.youtube,
                timeout=config.http_timeout_seconds,
            ),
        ]
    )
