"""Recognise supported YouTube page URLs and extract the video id."""

from __future__ import annotations

import re

from ytresolve.domain.entities.video import VideoReference
from ytresolve.domain.exceptions import NotValidURLError

_ID = r"(?P<id>[A-Za-z0-9_-]+)"
_HOST = r"(?:^|//|\.)(?:www\.|m\.)?"
# youtube.com, youtube.de, youtube.co.uk, youtube.com.br; the path must follow.
_YOUTUBE = r"youtube\.(?:[a-z]{2,3}|co\.[a-z]{2}|com\.[a-z]{2})(?=/)"

# Tried in order; the first match wins.
_URL_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "watch",
        re.compile(
            _HOST + _YOUTUBE + r"/watch\?(?:[^#\s]*&)?vi?=" + _ID,
            re.IGNORECASE,
        ),
    ),
    ("short", re.compile(_HOST + r"youtu\.be/" + _ID, re.IGNORECASE)),
    (
        "embed",
        re.compile(
            _HOST + _YOUTUBE + r"/embed/" + _ID,
            re.IGNORECASE,
        ),
    ),
)


def match_video_id(raw_url: str) -> str:
    """Return the video id of *raw_url*.

    Raises ``NotValidURLError`` when the URL matches none of the
    supported shapes (watch page, ``youtu.be`` short link, embed page).
    """
    for _shape, pattern in _URL_PATTERNS:
        m = pattern.search(raw_url.strip())
        if m:
            return m.group("id")
    raise NotValidURLError(raw_url)


def is_supported_url(raw_url: str) -> bool:
    try:
        match_video_id(raw_url)
    except NotValidURLError:
        return False
    return True


def video_reference(raw_url: str) -> VideoReference:
    """Build the immutable ``VideoReference`` for *raw_url*."""
    return VideoReference(source_url=raw_url, video_id=match_video_id(raw_url))
