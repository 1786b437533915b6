"""Shared test fixtures for the ytresolve test suite."""

from __future__ import annotations

import json
from typing import Any, Callable
from urllib.parse import quote_plus

import pytest

# ---------------------------------------------------------------------------
# Player script fixtures
# ---------------------------------------------------------------------------

# Helper object first, entry function later; names are arbitrary on purpose.
PLAYER_SCRIPT = (
    'var _yt_player={};(function(g){var window=this;'
    'var Wz={Ab:function(a,b){a.splice(0,b)},'
    "Cd:function(a){a.reverse()},"
    "Ef:function(a,b){var c=a[0];a[0]=a[b%a.length];a[b%a.length]=c}};"
    'g.lk=function(a){return a.split("").reverse().join("")};'
    'Xy=function(a){a=a.split("");Wz.Ef(a,2);Wz.Ab(a,1);Wz.Cd(a,45);'
    'return a.join("")};'
    "})(_yt_player);"
)

WATCH_PAGE = (
    "<html><head>"
    '<script src="/s/desktop/abc/jsbin/www-i18n.js"></script>'
    '<script src="/s/player/abc123/player_ias.vflset/en_US/base.js" '
    'nonce="x"></script>'
    "</head><body></body></html>"
)

PLAYER_URL = "https://www.youtube.com/s/player/abc123/player_ias.vflset/en_US/base.js"


@pytest.fixture()
def player_script() -> str:
    """Player script whose cipher is [SwapWithFront(2), DropFront(1), Reverse]."""
    return PLAYER_SCRIPT


@pytest.fixture()
def watch_page() -> str:
    return WATCH_PAGE


# ---------------------------------------------------------------------------
# Metadata payload fixtures
# ---------------------------------------------------------------------------


def _encode_body(payload: dict[str, Any]) -> str:
    text = json.dumps({"responseContext": {"serviceTrackingParams": []}, **payload})
    return (
        "status=ok&fflags=a%3D1&player_response="
        + quote_plus(text)
        + "&token=QUFFLUhq&enablecsi=1"
    )


@pytest.fixture()
def info_body() -> Callable[[dict[str, Any]], str]:
    """Build a metadata endpoint body embedding *payload*."""
    return _encode_body


@pytest.fixture()
def full_payload() -> dict[str, Any]:
    """Payload with one direct progressive and one ciphered audio format."""
    return {
        "videoDetails": {
            "videoId": "43TmnIaL3n4",
            "title": "Rock & Roll }& more",
            "shortDescription": "A description",
            "keywords": ["rock", "roll"],
            "viewCount": "12345",
            "channelId": "UC123",
            "author": "Some Channel",
            "thumbnail": {
                "thumbnails": [
                    {"url": "https://i.ytimg.com/vi/43TmnIaL3n4/default.jpg", "width": 120, "height": 90},
                    {"url": "https://i.ytimg.com/vi/43TmnIaL3n4/hq.jpg", "width": 480, "height": 360},
                ]
            },
        },
        "captions": {
            "playerCaptionsTracklistRenderer": {
                "captionTracks": [
                    {"baseUrl": "https://www.youtube.com/api/timedtext?lang=en", "languageCode": "en"},
                    {"baseUrl": "https://www.youtube.com/api/timedtext?lang=de", "languageCode": "de"},
                ]
            }
        },
        "streamingData": {
            "formats": [
                {
                    "itag": 22,
                    "url": "https://r1.example.com/videoplayback?itag=22",
                    "mimeType": 'video/mp4; codecs="avc1.64001F, mp4a.40.2"',
                    "bitrate": 1500000,
                    "qualityLabel": "720p",
                }
            ],
            "adaptiveFormats": [
                {
                    "itag": 140,
                    "signatureCipher": (
                        "s=abcde&sp=sig&url="
                        "https%3A%2F%2Fr1.example.com%2Fvideoplayback%3Fitag%3D140"
                    ),
                    "mimeType": 'audio/mp4; codecs="mp4a.40.2"',
                    "bitrate": 130000,
                }
            ],
        },
    }


@pytest.fixture()
def player_url() -> str:
    """Absolute URL of the player script referenced by ``WATCH_PAGE``."""
    return PLAYER_URL
