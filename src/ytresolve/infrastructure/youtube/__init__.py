"""YouTube handler: URL matching, metadata parsing, signature deciphering."""

from __future__ import annotations

from .handler import YouTubeHandler

__all__ = ["YouTubeHandler"]
