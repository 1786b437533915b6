"""Network calls of the YouTube handler.

Three endpoints are involved: the ``get_video_info`` metadata endpoint,
the watch page (only when a ciphered format shows up) and the player
script referenced by the watch page.  Every call is a plain GET bounded
by the configured timeout; outcomes are classified into the domain
error taxonomy and never retried here.
"""

from __future__ import annotations

import re
from urllib.parse import urljoin

import httpx
import structlog

from ytresolve.domain.exceptions import (
    BadResponseError,
    TooManyRequestsError,
    TransportFailureError,
)

log = structlog.get_logger(__name__)

# Query parameters that make the metadata endpoint answer like an embedded
# HTML5 TV client, which unlocks more formats.
_CLIENT_NAME = "TVHTML5"
_CLIENT_VERSION = "6.20180913"
_EMBED_URL = "https://youtube.googleapis.com/v/{video_id}"

# Skips the content-warning interstitial on the watch page.
_BPCTR = "9999999999"

_PLAYER_SCRIPT_RE = re.compile(
    r"""<script\b[^>]*?\bsrc\s*=\s*["']([^"']*player[^"']*\.js(?:\?[^"']*)?)["']""",
    re.IGNORECASE,
)


def extract_player_url(watch_html: str, base_url: str) -> str | None:
    """Return the absolute player script URL found in a watch page.

    Picks the first ``<script src=...>`` whose source contains ``player``
    and ends in ``.js`` (query string kept); relative paths are resolved
    against *base_url*.
    """
    m = _PLAYER_SCRIPT_RE.search(watch_html)
    if not m:
        return None
    return urljoin(base_url, m.group(1))


class YouTubeInfoFetcher:
    """Fetches metadata, watch page and player script for one host."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        host: str = "www.youtube.com",
        timeout: float = 30.0,
    ) -> None:
        self._http = http_client
        self._timeout = timeout
        self.base_url = f"https://{host}/"

    async def fetch(self, url: str, params: dict[str, str] | None = None) -> str:
        """GET *url* and return the body of a 200 response.

        Raises ``TooManyRequestsError`` on 429, ``BadResponseError`` on any
        other non-200 status and ``TransportFailureError`` on timeouts,
        connection-level failures and redirect loops.
        """
        try:
            resp = await self._http.get(url, params=params, timeout=self._timeout)
        except httpx.TimeoutException as exc:
            log.warning("youtube_request_timeout", url=url)
            raise TransportFailureError(url, "timeout") from exc
        except httpx.HTTPError as exc:
            # Connection errors, redirect loops, protocol errors.
            log.warning("youtube_request_failed", url=url, error=str(exc))
            raise TransportFailureError(url, str(exc)) from exc

        if resp.status_code == 429:
            log.warning("youtube_rate_limited", url=url)
            raise TooManyRequestsError(resp.status_code, url)
        if resp.status_code != 200:
            log.warning("youtube_http_error", status=resp.status_code, url=url)
            raise BadResponseError(resp.status_code, url)
        return resp.text

    async def fetch_video_info(self, video_id: str) -> str:
        """Raw (percent-encoded) body of the metadata endpoint."""
        body = await self.fetch(
            urljoin(self.base_url, "get_video_info"),
            params={
                "video_id": video_id,
                "eurl": _EMBED_URL.format(video_id=video_id),
                "html5": "1",
                "c": _CLIENT_NAME,
                "cver": _CLIENT_VERSION,
            },
        )
        log.debug("youtube_info_fetched", video_id=video_id, size=len(body))
        return body

    async def fetch_watch_page(self, video_id: str) -> str:
        return await self.fetch(
            urljoin(self.base_url, "watch"),
            params={
                "v": video_id,
                "gl": "US",
                "hl": "en",
                "has_verified": "1",
                "bpctr": _BPCTR,
            },
        )

    async def fetch_player_script(self, video_id: str) -> str:
        """Fetch the player script referenced by the watch page.

        Returns an empty string when the watch page carries no player
        script tag; deciphering then fails per format, not per request.
        """
        watch_html = await self.fetch_watch_page(video_id)
        player_url = extract_player_url(watch_html, self.base_url)
        if player_url is None:
            log.warning("youtube_player_url_not_found", video_id=video_id)
            return ""
        script = await self.fetch(player_url)
        log.debug("youtube_player_fetched", player_url=player_url, size=len(script))
        return script
