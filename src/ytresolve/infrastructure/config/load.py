"""Layered configuration loading.

Layers, lowest precedence first: built-in defaults, YAML file, environment
(``YTRESOLVE_*``, optionally seeded from a dotenv file), CLI overrides.
Every layer is normalised to the sectioned YAML shape before merging, and
the merged result is validated once as ``AppConfig``.
"""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_TOP_LEVEL_KEYS: frozenset[str] = frozenset({"app_name", "environment"})

# Flat key prefix -> YAML section. ``log_level`` lives in ``logging.level``.
_FLAT_PREFIXES: tuple[tuple[str, str], ...] = (
    ("http_", "http"),
    ("log_", "logging"),
    ("youtube_", "youtube"),
)
_SECTIONS: frozenset[str] = frozenset(section for _, section in _FLAT_PREFIXES)


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *override* into *base* in place; nested mappings merge, the rest replace."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def _split_flat_key(key: str) -> tuple[str, str] | None:
    for prefix, section in _FLAT_PREFIXES:
        if key.startswith(prefix):
            return section, key[len(prefix):]
    return None


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one layer into the sectioned shape.

    Accepts both ``{"http": {"timeout_seconds": 5}}`` and the flat
    ``{"http_timeout_seconds": 5}`` used by env vars and CLI flags.
    Unknown keys are dropped.
    """
    out: dict[str, Any] = {}
    for key, value in data.items():
        if key in _TOP_LEVEL_KEYS:
            out[key] = value
        elif key in _SECTIONS and isinstance(value, Mapping):
            out.setdefault(key, {}).update(value)
        else:
            split = _split_flat_key(key)
            if split is not None:
                section, section_key = split
                out.setdefault(section, {})[section_key] = value
    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _layers(
    config_path: Path | None, cli_overrides: Mapping[str, Any]
) -> Iterator[Mapping[str, Any]]:
    yield deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        yield _read_yaml_config(config_path)
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with precedence defaults < YAML < env < CLI.

    Raises ``FileNotFoundError`` for a missing YAML or dotenv file,
    ``ValueError`` for a YAML document that is not a mapping and
    ``pydantic.ValidationError`` for invalid values.  Never writes to
    the filesystem.
    """
    # Dotenv values join the env layer; real env vars win over them.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        _deep_merge(merged, _normalize_layer(layer))
    return AppConfig.model_validate(merged)
