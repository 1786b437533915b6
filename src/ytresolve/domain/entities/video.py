"""Domain entities for video resolution.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class StreamKind(str, Enum):
    """Media carried by a resolved stream."""

    VIDEO = "video"  # muxed audio + video
    AUDIO = "audio"


@dataclass(frozen=True)
class VideoReference:
    """A supported page URL together with the video id extracted from it."""

    source_url: str
    video_id: str

    def __post_init__(self) -> None:
        if not _VIDEO_ID_RE.match(self.video_id):
            raise ValueError(f"invalid video id: {self.video_id!r}")


@dataclass(frozen=True)
class Thumbnail:
    url: str
    width: int | None = None
    height: int | None = None

    @property
    def label(self) -> str:
        """Resolution label, e.g. ``"1280x720"``."""
        return f"{self.width or 0}x{self.height or 0}"


@dataclass(frozen=True)
class CaptionTrack:
    url: str
    language_code: str | None = None


@dataclass(frozen=True)
class StreamFormatDescriptor:
    """One entry of the payload's format lists.

    Exactly one of ``direct_url`` / ``cipher_blob`` is expected; a
    descriptor carrying neither cannot be resolved.
    """

    mime_type: str = ""
    quality_label: str | None = None
    bitrate: int | None = None
    itag: int | None = None
    direct_url: str | None = None
    cipher_blob: str | None = None

    @property
    def quality(self) -> str:
        """Human-facing quality: label first, numeric bitrate second."""
        if self.quality_label:
            return self.quality_label
        if self.bitrate is not None:
            return str(self.bitrate)
        return ""


@dataclass(frozen=True)
class VideoInfo:
    """Parsed metadata payload. Every field may be absent."""

    title: str | None = None
    description: str | None = None
    keywords: tuple[str, ...] = ()
    view_count: int | None = None
    channel_id: str | None = None
    author_name: str | None = None
    thumbnails: tuple[Thumbnail, ...] = ()
    caption_tracks: tuple[CaptionTrack, ...] = ()
    progressive_formats: tuple[StreamFormatDescriptor, ...] = ()
    adaptive_formats: tuple[StreamFormatDescriptor, ...] = ()


@dataclass(frozen=True)
class ResolvedStream:
    """A format descriptor resolved to a playable URL."""

    url: str
    quality: str
    kind: StreamKind


@dataclass(frozen=True)
class SkippedFormat:
    """A format descriptor that could not be resolved (non-fatal)."""

    reason: str
    mime_type: str = ""
    itag: int | None = None


@dataclass(frozen=True)
class StreamSelection:
    """Resolved streams of one request, in payload order."""

    video_streams: tuple[ResolvedStream, ...] = ()
    audio_streams: tuple[ResolvedStream, ...] = ()
    skipped: tuple[SkippedFormat, ...] = ()

    @property
    def video_preview(self) -> ResolvedStream | None:
        """First resolved progressive stream."""
        return self.video_streams[0] if self.video_streams else None


@dataclass(frozen=True)
class Author:
    channel_id: str
    display_name: str | None = None


@dataclass(frozen=True)
class FetchedResource:
    """Everything resolved for one page URL, handed to the caller."""

    source_url: str
    ext_source: str
    title: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()
    view_count: int | None = None
    author: Author | None = None
    image_preview: Thumbnail | None = None
    captions: tuple[CaptionTrack, ...] = ()
    video_streams: tuple[ResolvedStream, ...] = ()
    audio_streams: tuple[ResolvedStream, ...] = ()
    video_preview: ResolvedStream | None = None
