# packages/core/notetune_core/ports/catalog.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Song:
    """
    A playable catalog search result.

    preview_url is the only field we can count on for playback, so a Song
    without one is never constructed.
    """
    id: int | str
    title: str
    artist: str
    album: str
    cover_url: str
    preview_url: str
    duration_seconds: int = 30

    def __post_init__(self) -> None:
        if not self.preview_url:
            raise ValueError(f"Song {self.id!r} has no preview URL")


class CatalogClient:
    """
    Port interface: core depends on this, infra implements it.

    Implementations return an empty list when no data is available and never
    raise for network or payload problems.
    """

    async def search(self, term: str, *, limit: int) -> list[Song]:
        raise NotImplementedError
