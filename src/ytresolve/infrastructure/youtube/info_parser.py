"""Extract the embedded player payload from the metadata endpoint body.

The endpoint answers with a form-encoded ``key=value&key=value`` body.
One of the values is a JSON object opening with ``{"responseContext``.
That object is decoded with a JSON-aware scan (``raw_decode``) so that
``&`` or braces inside string values do not cut it short, then
validated once against lenient wire models and mapped to ``VideoInfo``.
"""

from __future__ import annotations

import json
from typing import List, Optional
from urllib.parse import unquote_plus

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ytresolve.domain.entities.video import (
    CaptionTrack,
    StreamFormatDescriptor,
    Thumbnail,
    VideoInfo,
)
from ytresolve.domain.exceptions import NothingToExtractError

log = structlog.get_logger(__name__)

PAYLOAD_MARKER = '{"responseContext'

_decoder = json.JSONDecoder()


# === Wire models (payload shape, every member optional) ===


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class _WireThumbnail(_WireModel):
    url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class _WireThumbnailList(_WireModel):
    thumbnails: Optional[List[_WireThumbnail]] = None


class _WireVideoDetails(_WireModel):
    title: Optional[str] = None
    short_description: Optional[str] = Field(default=None, alias="shortDescription")
    keywords: Optional[List[str]] = None
    view_count: Optional[int] = Field(default=None, alias="viewCount")
    channel_id: Optional[str] = Field(default=None, alias="channelId")
    author: Optional[str] = None
    thumbnail: Optional[_WireThumbnailList] = None


class _WireCaptionTrack(_WireModel):
    base_url: Optional[str] = Field(default=None, alias="baseUrl")
    language_code: Optional[str] = Field(default=None, alias="languageCode")


class _WireCaptionTracklist(_WireModel):
    caption_tracks: Optional[List[_WireCaptionTrack]] = Field(
        default=None, alias="captionTracks"
    )


class _WireCaptions(_WireModel):
    tracklist: Optional[_WireCaptionTracklist] = Field(
        default=None, alias="playerCaptionsTracklistRenderer"
    )


class _WireFormat(_WireModel):
    itag: Optional[int] = None
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    quality_label: Optional[str] = Field(default=None, alias="qualityLabel")
    bitrate: Optional[int] = None
    url: Optional[str] = None
    signature_cipher: Optional[str] = Field(default=None, alias="signatureCipher")
    cipher: Optional[str] = None  # older payloads


class _WireStreamingData(_WireModel):
    formats: Optional[List[_WireFormat]] = None
    adaptive_formats: Optional[List[_WireFormat]] = Field(
        default=None, alias="adaptiveFormats"
    )


class _WirePlayerResponse(_WireModel):
    video_details: Optional[_WireVideoDetails] = Field(
        default=None, alias="videoDetails"
    )
    captions: Optional[_WireCaptions] = None
    streaming_data: Optional[_WireStreamingData] = Field(
        default=None, alias="streamingData"
    )


# === Extraction ===


def extract_payload(raw_body: str) -> dict:
    """Return the embedded payload object of a metadata endpoint body.

    Raises ``NothingToExtractError`` when the marker is missing, the JSON
    is truncated or malformed, or the object is not followed by the end
    of the body or a ``&`` separator.
    """
    content = unquote_plus(raw_body)
    start = content.find(PAYLOAD_MARKER)
    if start == -1:
        raise NothingToExtractError("payload marker not found")

    try:
        payload, end = _decoder.raw_decode(content, start)
    except json.JSONDecodeError as exc:
        raise NothingToExtractError(f"malformed payload: {exc.msg}") from exc

    if end < len(content) and content[end] != "&":
        raise NothingToExtractError("unexpected content after payload")
    if not isinstance(payload, dict):
        raise NothingToExtractError("payload is not an object")
    return payload


def _descriptor(fmt: _WireFormat) -> StreamFormatDescriptor:
    return StreamFormatDescriptor(
        mime_type=fmt.mime_type or "",
        quality_label=fmt.quality_label,
        bitrate=fmt.bitrate,
        itag=fmt.itag,
        direct_url=fmt.url or None,
        cipher_blob=fmt.signature_cipher or fmt.cipher or None,
    )


def _to_video_info(wire: _WirePlayerResponse) -> VideoInfo:
    details = wire.video_details or _WireVideoDetails()
    thumbs = (details.thumbnail.thumbnails if details.thumbnail else None) or []

    tracks: list[CaptionTrack] = []
    if wire.captions and wire.captions.tracklist:
        tracks = [
            CaptionTrack(url=t.base_url, language_code=t.language_code)
            for t in wire.captions.tracklist.caption_tracks or []
            if t.base_url
        ]

    streaming = wire.streaming_data or _WireStreamingData()
    return VideoInfo(
        title=details.title,
        description=details.short_description,
        keywords=tuple(details.keywords or ()),
        view_count=details.view_count,
        channel_id=details.channel_id,
        author_name=details.author,
        thumbnails=tuple(
            Thumbnail(url=t.url, width=t.width, height=t.height)
            for t in thumbs
            if t.url
        ),
        caption_tracks=tuple(tracks),
        progressive_formats=tuple(map(_descriptor, streaming.formats or ())),
        adaptive_formats=tuple(map(_descriptor, streaming.adaptive_formats or ())),
    )


def parse_video_info(raw_body: str) -> VideoInfo:
    """Parse a metadata endpoint body into ``VideoInfo``.

    Absent fields come back as ``None`` or empty tuples; only a missing
    or structurally broken payload is an error.
    """
    payload = extract_payload(raw_body)
    try:
        wire = _WirePlayerResponse.model_validate(payload)
    except ValidationError as exc:
        log.warning("youtube_payload_invalid", errors=exc.error_count())
        raise NothingToExtractError("payload failed validation") from exc

    info = _to_video_info(wire)
    log.debug(
        "youtube_payload_parsed",
        has_details=wire.video_details is not None,
        progressive=len(info.progressive_formats),
        adaptive=len(info.adaptive_formats),
        captions=len(info.caption_tracks),
    )
    return info
