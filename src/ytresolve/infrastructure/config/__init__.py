from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, YouTubeConfig

__all__ = ["AppConfig", "EnvOverrides", "YouTubeConfig", "load_config"]
