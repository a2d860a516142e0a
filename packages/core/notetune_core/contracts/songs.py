from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from notetune_core.ports.catalog import Song
from notetune_core.ports.links import SongData, SongSource


class SongDTO(BaseModel):
    """
    Catalog song as stored in a note's `song` field.
    """
    id: int | str
    title: str
    artist: str
    album: str = ""
    album_cover: str = Field(default="", alias="albumCover")
    preview: str
    duration: int

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_song(cls, song: Song) -> SongDTO:
        return cls(
            id=song.id,
            title=song.title,
            artist=song.artist,
            album=song.album,
            album_cover=song.cover_url,
            preview=song.preview_url,
            duration=song.duration_seconds,
        )

    def to_field(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SongDataDTO(BaseModel):
    """
    Attached song as stored in a note's `songData` field.

    Exactly one of video_id / track_id is set, matching `type`.
    """
    type: Literal["youtube", "spotify"]
    video_id: str | None = Field(default=None, alias="videoId")
    track_id: str | None = Field(default=None, alias="trackId")
    title: str
    artist: str
    album_cover: str | None = Field(default=None, alias="albumCover")
    start_time: int = Field(default=0, alias="startTime")
    end_time: int = Field(alias="endTime")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_song_data(cls, data: SongData) -> SongDataDTO:
        is_youtube = data.source is SongSource.YOUTUBE
        return cls(
            type=data.source.value,
            video_id=data.source_id if is_youtube else None,
            track_id=None if is_youtube else data.source_id,
            title=data.title,
            artist=data.artist,
            album_cover=data.cover_url,
            start_time=data.start_time,
            end_time=data.end_time,
        )

    def to_field(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
