"""Registry that dispatches page URLs to source-specific handlers."""

from __future__ import annotations

import structlog

from ytresolve.domain.entities.video import FetchedResource
from ytresolve.domain.exceptions import NotValidURLError
from ytresolve.domain.ports.url_handler import UrlHandlerPort

log = structlog.get_logger(__name__)


class HandlerRegistry:
    """Dispatches URL resolution to the first handler that accepts the URL.

    Handlers are tried in registration order.  The registry keeps no
    per-request state, so one instance can serve concurrent requests.
    """

    def __init__(self, handlers: list[UrlHandlerPort] | None = None) -> None:
        self._handlers: dict[str, UrlHandlerPort] = {}
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: UrlHandlerPort) -> None:
        """Register *handler*; a handler with the same name is replaced."""
        self._handlers[handler.name] = handler
        log.debug("url_handler_registered", handler=handler.name)

    @property
    def supported_sources(self) -> list[str]:
        """Return names of registered handlers."""
        return list(self._handlers.keys())

    def handler_for(self, url: str) -> UrlHandlerPort | None:
        for handler in self._handlers.values():
            if handler.can_handle(url):
                return handler
        return None

    def can_handle(self, url: str) -> bool:
        return self.handler_for(url) is not None

    async def resolve(self, url: str) -> FetchedResource:
        """Resolve *url* with the matching handler.

        Raises ``NotValidURLError`` when no handler accepts the URL; any
        ``ResolveError`` raised by the handler propagates unchanged.
        """
        handler = self.handler_for(url)
        if handler is None:
            log.info("url_handler_not_found", url=url)
            raise NotValidURLError(url)
        log.debug("url_handler_selected", handler=handler.name, url=url)
        return await handler.resolve(url)
