from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from ytresolve.domain.entities.video import FetchedResource
from ytresolve.domain.exceptions import ResolveError, TooManyRequestsError
from ytresolve.infrastructure.common import create_http_client
from ytresolve.infrastructure.composition import build_registry
from ytresolve.infrastructure.config import AppConfig, load_config
from ytresolve.infrastructure.logging.setup import configure_logging
from ytresolve.interfaces.cli import exit_codes

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ytresolve",
        description="Resolve a video page URL into stream URLs and metadata (JSON).",
    )
    parser.add_argument("url", help="Page URL to resolve.")

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--timeout",
        default=None,
        type=float,
        help="Override per-request timeout in seconds.",
    )
    parser.add_argument(
        "--verify-tls",
        action="store_true",
        default=None,
        help="Verify TLS certificates of outbound requests.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    return parser.parse_args(argv)


def resource_to_dict(resource: FetchedResource) -> dict[str, Any]:
    """JSON-ready representation of a resolved resource."""
    data = dataclasses.asdict(resource)
    for key in ("video_streams", "audio_streams"):
        for stream in data[key]:
            stream["kind"] = stream["kind"].value
    if data["video_preview"] is not None:
        data["video_preview"]["kind"] = data["video_preview"]["kind"].value
    return data


async def _resolve(config: AppConfig, url: str) -> FetchedResource:
    async with create_http_client(config) as client:
        registry = build_registry(config, client)
        return await registry.resolve(url)


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config once, configures logging, resolves the URL and prints
    the result as JSON on stdout.  Returns the process exit code.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    cli_overrides: dict[str, Any] = {}
    if args.timeout is not None:
        cli_overrides["http_timeout_seconds"] = args.timeout
    if args.verify_tls:
        cli_overrides["http_verify_tls"] = True
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    try:
        config = load_config(
            config_path=Path(args.config) if args.config else None,
            dotenv_path=Path(args.dotenv) if args.dotenv else None,
            cli_overrides=cli_overrides,
        )
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        print(f"ytresolve: configuration error: {exc}", file=sys.stderr)
        return exit_codes.CONFIG_ERROR

    configure_logging(config)

    try:
        resource = asyncio.run(_resolve(config, args.url))
    except KeyboardInterrupt:
        return exit_codes.KEYBOARD_INTERRUPT
    except TooManyRequestsError as exc:
        log.error("resolve_rate_limited", url=args.url, error=str(exc))
        return exit_codes.RATE_LIMITED
    except ResolveError as exc:
        log.error(
            "resolve_failed",
            url=args.url,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return exit_codes.RESOLVE_ERROR

    json.dump(resource_to_dict(resource), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return exit_codes.SUCCESS


if __name__ == "__main__":
    raise SystemExit(start())
