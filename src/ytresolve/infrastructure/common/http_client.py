"""Factory for the shared outbound ``httpx.AsyncClient``."""

from __future__ import annotations

import httpx
import structlog

from ytresolve.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)


def create_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Build the client used for every outbound request of a handler.

    ``config.http_verify_tls`` controls peer and host certificate
    verification.  It defaults to off; a warning is logged whenever a
    client is created without verification so the trade-off is visible.
    """
    if not config.http_verify_tls:
        log.warning(
            "http_tls_verification_disabled",
            hint="set http.verify_tls=true to verify peer certificates",
        )
    return httpx.AsyncClient(
        timeout=config.http_timeout_seconds,
        follow_redirects=True,
        verify=config.http_verify_tls,
        headers={"User-Agent": config.http_user_agent},
    )
