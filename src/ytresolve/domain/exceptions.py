"""Resolution error taxonomy.

Request-fatal errors propagate to the caller.  ``NotValidItemError`` and
its subclass ``DecodeUnavailableError`` are local to a single format
descriptor and never escape the stream-format resolver.
"""

from __future__ import annotations


class ResolveError(Exception):
    """Base class for all resolution errors."""


class NotValidURLError(ResolveError):
    """The input URL matches none of the supported URL shapes."""


class NothingToExtractError(ResolveError):
    """The metadata payload is missing or cannot be parsed."""


class BadResponseError(ResolveError):
    """An HTTP call returned an unexpected status code."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"HTTP {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class TooManyRequestsError(BadResponseError):
    """HTTP 429. Callers implementing backoff should throttle."""


class TransportFailureError(ResolveError):
    """Network-level failure (timeout, connection, DNS, TLS)."""

    def __init__(self, url: str, reason: str = "") -> None:
        super().__init__(f"transport failure for {url}: {reason}" if reason else url)
        self.url = url


class NotValidItemError(ResolveError):
    """A single format descriptor cannot be resolved."""


class DecodeUnavailableError(NotValidItemError):
    """No cipher program could be derived from the player script."""
