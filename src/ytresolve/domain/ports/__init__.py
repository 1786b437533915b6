from .url_handler import UrlHandlerPort

__all__ = ["UrlHandlerPort"]
