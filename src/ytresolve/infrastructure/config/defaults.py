"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "ytresolve",
    "environment": "dev",
    "http": {
        "timeout_seconds": 30.0,
        "user_agent": "ytresolve/0.1.0",
        # Outbound requests skip certificate verification unless enabled.
        "verify_tls": False,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "youtube": {
        "host": "www.youtube.com",
        "video_mime_type": "video/mp4",
        "audio_mime_type": "audio/mp4",
    },
}
