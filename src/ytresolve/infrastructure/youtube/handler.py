"""YouTube page URL handler.

Pipeline per request: match the URL, fetch and parse the metadata
payload, resolve stream formats (fetching the watch page and player
script only if a ciphered format shows up), assemble the result.
Requests share no mutable state; the player cipher is memoised per call
to ``resolve``.
"""

from __future__ import annotations

import httpx
import structlog

from ytresolve.domain.entities.video import FetchedResource
from ytresolve.infrastructure.config.schema import YouTubeConfig
from ytresolve.infrastructure.youtube.assembler import assemble_resource
from ytresolve.infrastructure.youtube.cipher import CipherEngine
from ytresolve.infrastructure.youtube.fetcher import YouTubeInfoFetcher
from ytresolve.infrastructure.youtube.info_parser import parse_video_info
from ytresolve.infrastructure.youtube.stream_formats import (
    PlayerCipherSource,
    StreamFormatResolver,
)
from ytresolve.infrastructure.youtube.url_matcher import (
    is_supported_url,
    video_reference,
)

log = structlog.get_logger(__name__)


class YouTubeHandler:
    """Resolves YouTube watch, short-link and embed URLs."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        config: YouTubeConfig | None = None,
        timeout: float = 30.0,
    ) -> None:
        config = config or YouTubeConfig()
        self._fetcher = YouTubeInfoFetcher(
            http_client, host=config.host, timeout=timeout
        )
        self._formats = StreamFormatResolver(
            video_mime_type=config.video_mime_type,
            audio_mime_type=config.audio_mime_type,
        )
        self._engine = CipherEngine()

    @property
    def name(self) -> str:
        return "youtube"

    def can_handle(self, url: str) -> bool:
        return is_supported_url(url)

    async def resolve(self, url: str) -> FetchedResource:
        """Resolve *url* into metadata and playable streams.

        Raises ``NotValidURLError``, ``NothingToExtractError``,
        ``BadResponseError`` (``TooManyRequestsError`` on 429) or
        ``TransportFailureError``.  Formats that cannot be resolved are
        dropped from the result instead.
        """
        ref = video_reference(url)
        log.debug("youtube_resolve_start", video_id=ref.video_id)

        body = await self._fetcher.fetch_video_info(ref.video_id)
        info = parse_video_info(body)

        async def load_script() -> str:
            return await self._fetcher.fetch_player_script(ref.video_id)

        cipher_source = PlayerCipherSource(load_script, self._engine)
        selection = await self._formats.resolve(info, cipher_source)

        log.info(
            "youtube_resolve_success",
            video_id=ref.video_id,
            video_streams=len(selection.video_streams),
            audio_streams=len(selection.audio_streams),
            skipped=len(selection.skipped),
            player_fetched=cipher_source.fetch_count > 0,
        )
        return assemble_resource(ref.source_url, info, selection)
