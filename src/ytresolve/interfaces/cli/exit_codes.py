"""Exit-code constants used by the CLI layer."""

from __future__ import annotations

SUCCESS: int = 0
"""Resolution completed; result printed to stdout."""

RESOLVE_ERROR: int = 1
"""A known ResolveError was caught (bad URL, nothing to extract, HTTP error)."""

CONFIG_ERROR: int = 2
"""Configuration could not be loaded or validated."""

RATE_LIMITED: int = 3
"""The platform answered HTTP 429; retry later."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
