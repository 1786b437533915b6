from .cipher import CipherOperation, CipherProgram, DropFront, Reverse, SwapWithFront
from .video import (
    Author,
    CaptionTrack,
    FetchedResource,
    ResolvedStream,
    SkippedFormat,
    StreamFormatDescriptor,
    StreamKind,
    StreamSelection,
    Thumbnail,
    VideoInfo,
    VideoReference,
)

__all__ = [
    "Author",
    "CaptionTrack",
    "CipherOperation",
    "CipherProgram",
    "DropFront",
    "FetchedResource",
    "ResolvedStream",
    "Reverse",
    "SkippedFormat",
    "StreamFormatDescriptor",
    "StreamKind",
    "StreamSelection",
    "SwapWithFront",
    "Thumbnail",
    "VideoInfo",
    "VideoReference",
]
