"""Package resolved streams and metadata into a ``FetchedResource``."""

from __future__ import annotations

from ytresolve.domain.entities.video import (
    Author,
    FetchedResource,
    StreamSelection,
    VideoInfo,
)
from ytresolve.infrastructure.youtube.stream_formats import select_preview_thumbnail

EXT_SOURCE = "youtube"


def assemble_resource(
    source_url: str, info: VideoInfo, selection: StreamSelection
) -> FetchedResource:
    author = None
    if info.channel_id:
        author = Author(channel_id=info.channel_id, display_name=info.author_name)

    return FetchedResource(
        source_url=source_url,
        ext_source=EXT_SOURCE,
        title=info.title or None,
        description=info.description or None,
        tags=info.keywords,
        view_count=info.view_count,
        author=author,
        image_preview=select_preview_thumbnail(info.thumbnails),
        captions=info.caption_tracks,
        video_streams=selection.video_streams,
        audio_streams=selection.audio_streams,
        video_preview=selection.video_preview,
    )
