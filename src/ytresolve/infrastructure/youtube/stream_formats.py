"""Turn payload format descriptors into playable stream URLs.

Direct URLs are used as-is.  Ciphered descriptors carry a query-string
blob (``s``, ``sp``, ``url``); the signature ``s`` is deciphered with the
program recovered from the player script and appended to ``url`` under
the parameter name ``sp``.  Each descriptor yields either a
``ResolvedStream`` or a ``SkippedFormat``; the selection keeps the
successes.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Sequence
from urllib.parse import parse_qs, urlencode

import structlog

from ytresolve.domain.entities.cipher import CipherProgram
from ytresolve.domain.entities.video import (
    ResolvedStream,
    SkippedFormat,
    StreamFormatDescriptor,
    StreamKind,
    StreamSelection,
    Thumbnail,
    VideoInfo,
)
from ytresolve.domain.exceptions import DecodeUnavailableError, NotValidItemError
from ytresolve.infrastructure.youtube.cipher import CipherEngine

log = structlog.get_logger(__name__)

_DEFAULT_SIGNATURE_PARAM = "signature"


class PlayerCipherSource:
    """Request-scoped, lazily derived cipher program.

    The player script is fetched through *load_script* on first use only
    and the program is derived once; a derivation failure is remembered
    and re-raised for later descriptors without fetching again.  Create
    one instance per resolution request.
    """

    def __init__(
        self,
        load_script: Callable[[], Awaitable[str]],
        engine: CipherEngine | None = None,
    ) -> None:
        self._load_script = load_script
        self._engine = engine or CipherEngine()
        self._program: CipherProgram | None = None
        self._failure: DecodeUnavailableError | None = None
        self.fetch_count = 0

    async def program(self) -> CipherProgram:
        if self._program is not None:
            return self._program
        if self._failure is not None:
            raise self._failure

        self.fetch_count += 1
        script = await self._load_script()
        try:
            self._program = self._engine.derive(script)
        except DecodeUnavailableError as exc:
            log.warning("youtube_cipher_unavailable", reason=str(exc))
            self._failure = exc
            raise
        return self._program

    async def decipher(self, signature: str) -> str:
        program = await self.program()
        return self._engine.apply(program, signature)


def append_query_param(url: str, name: str, value: str) -> str:
    """Append ``name=value`` to *url*, keeping the existing query untouched."""
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{urlencode({name: value})}"


def parse_cipher_blob(blob: str) -> tuple[str, str, str]:
    """Split a cipher blob into ``(url, signature, signature_param)``.

    Raises ``NotValidItemError`` when ``url`` or ``s`` is missing.
    """
    fields = parse_qs(blob)
    url = fields.get("url", [""])[0]
    signature = fields.get("s", [""])[0]
    if not url or not signature:
        raise NotValidItemError("cipher blob lacks url or signature")
    sp = fields.get("sp", [_DEFAULT_SIGNATURE_PARAM])[0] or _DEFAULT_SIGNATURE_PARAM
    return url, signature, sp


def select_preview_thumbnail(thumbnails: Sequence[Thumbnail]) -> Thumbnail | None:
    """Highest resolution thumbnail: the payload lists them ascending."""
    return thumbnails[-1] if thumbnails else None


class StreamFormatResolver:
    """Resolves progressive video and adaptive audio formats of a payload."""

    def __init__(
        self,
        *,
        video_mime_type: str = "video/mp4",
        audio_mime_type: str = "audio/mp4",
    ) -> None:
        self._video_mime = video_mime_type
        self._audio_mime = audio_mime_type

    async def resolve(
        self, info: VideoInfo, cipher_source: PlayerCipherSource
    ) -> StreamSelection:
        video: list[ResolvedStream] = []
        audio: list[ResolvedStream] = []
        skipped: list[SkippedFormat] = []

        groups = (
            (info.progressive_formats, self._video_mime, StreamKind.VIDEO, video),
            (info.adaptive_formats, self._audio_mime, StreamKind.AUDIO, audio),
        )
        for descriptors, mime, kind, bucket in groups:
            for fmt in descriptors:
                if mime not in fmt.mime_type:
                    continue
                outcome = await self._resolve_one(fmt, kind, cipher_source)
                if isinstance(outcome, ResolvedStream):
                    bucket.append(outcome)
                else:
                    skipped.append(outcome)

        if skipped:
            log.info(
                "youtube_formats_skipped",
                count=len(skipped),
                reasons=sorted({s.reason for s in skipped}),
            )
        return StreamSelection(
            video_streams=tuple(video),
            audio_streams=tuple(audio),
            skipped=tuple(skipped),
        )

    async def _resolve_one(
        self,
        fmt: StreamFormatDescriptor,
        kind: StreamKind,
        cipher_source: PlayerCipherSource,
    ) -> ResolvedStream | SkippedFormat:
        if fmt.direct_url:
            return ResolvedStream(url=fmt.direct_url, quality=fmt.quality, kind=kind)
        if not fmt.cipher_blob:
            return SkippedFormat("no url", mime_type=fmt.mime_type, itag=fmt.itag)

        try:
            base_url, signature, sp = parse_cipher_blob(fmt.cipher_blob)
            deciphered = await cipher_source.decipher(signature)
        except NotValidItemError as exc:
            log.debug("youtube_format_skipped", itag=fmt.itag, reason=str(exc))
            return SkippedFormat(str(exc), mime_type=fmt.mime_type, itag=fmt.itag)

        return ResolvedStream(
            url=append_query_param(base_url, sp, deciphered),
            quality=fmt.quality,
            kind=kind,
        )
