# packages/core/notetune_core/ports/links.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

CLIP_SECONDS: Final = 30


class SongSource(str, Enum):
    YOUTUBE = "youtube"
    SPOTIFY = "spotify"


@dataclass(frozen=True)
class SongData:
    """
    A song attached to a note from a pasted share link.

    The playback window is [start_time, end_time] in seconds.
    """
    source: SongSource
    source_id: str
    title: str
    artist: str
    cover_url: str | None = None
    start_time: int = 0
    end_time: int = CLIP_SECONDS

    def __post_init__(self) -> None:
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Invalid playback window {self.start_time}..{self.end_time} for {self.source_id}"
            )


@dataclass(frozen=True)
class EmbedMetadata:
    """
    Lightweight oEmbed data for a shared link.
    """
    title: str | None
    thumbnail_url: str | None


class EmbedClient:
    """
    Port interface for embed-metadata lookups. None means "nothing found".
    """

    async def fetch_youtube(self, video_id: str) -> EmbedMetadata | None:
        raise NotImplementedError

    async def fetch_spotify(self, track_id: str) -> EmbedMetadata | None:
        raise NotImplementedError
