"""Port for source-specific page URL handlers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ytresolve.domain.entities.video import FetchedResource


@runtime_checkable
class UrlHandlerPort(Protocol):
    """Resolves a page URL of one media source into a ``FetchedResource``.

    Implementations handle site-specific extraction logic (metadata
    endpoints, signature deciphering, etc.).
    """

    @property
    def name(self) -> str:
        """Source name this handler covers (e.g. 'youtube')."""
        ...

    def can_handle(self, url: str) -> bool:
        """Return True if *url* has a shape this handler recognises."""
        ...

    async def resolve(self, url: str) -> FetchedResource:
        """Resolve *url*; raises a ``ResolveError`` subclass on failure."""
        ...
