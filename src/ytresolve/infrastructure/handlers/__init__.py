"""URL handler registry."""

from __future__ import annotations

from .registry import HandlerRegistry

__all__ = ["HandlerRegistry"]
