# packages/core/notetune_core/ports/song_cache.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from notetune_core.ports.catalog import Song

PayloadT = TypeVar("PayloadT")


@dataclass(frozen=True)
class CacheEntry(Generic[PayloadT]):
    """
    A cached payload stamped with its creation time (clock seconds).
    """
    payload: PayloadT
    created_at: float

    def is_fresh(self, *, now: float, ttl_seconds: float) -> bool:
        return now - self.created_at < ttl_seconds


class SongCache:
    """
    Port interface for the search and popular-songs caches.

    get_* return None on a miss or when the entry has expired.
    """

    def get_search(self, key: str) -> list[Song] | None:
        raise NotImplementedError

    def put_search(self, key: str, songs: list[Song]) -> None:
        raise NotImplementedError

    def get_popular(self) -> list[Song] | None:
        raise NotImplementedError

    def put_popular(self, songs: list[Song]) -> None:
        raise NotImplementedError
