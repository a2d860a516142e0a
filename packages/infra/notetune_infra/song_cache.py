from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from notetune_core.ports.catalog import Song
from notetune_core.ports.song_cache import CacheEntry, SongCache

logger = logging.getLogger(__name__)

SEARCH_TTL_SECONDS = 30 * 60
POPULAR_TTL_SECONDS = 2 * 60 * 60
SWEEP_INTERVAL_SECONDS = 10 * 60


class InMemorySongCache(SongCache):
    """
    Process-local search and popular-songs caches.

    Expiry is lazy: an expired entry is evicted on read and reported as a miss.
    The periodic sweep only bounds memory for queries that are never repeated.
    """

    def __init__(
        self,
        *,
        search_ttl_seconds: float = SEARCH_TTL_SECONDS,
        popular_ttl_seconds: float = POPULAR_TTL_SECONDS,
        sweep_interval_seconds: float = SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._search_ttl_seconds = search_ttl_seconds
        self._popular_ttl_seconds = popular_ttl_seconds
        self._sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._search: dict[str, CacheEntry[tuple[Song, ...]]] = {}
        self._popular: CacheEntry[tuple[Song, ...]] | None = None
        self._sweep_task: asyncio.Task[None] | None = None

    # --- search cache ---

    def get_search(self, key: str) -> list[Song] | None:
        entry = self._search.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(now=self._clock(), ttl_seconds=self._search_ttl_seconds):
            self._search.pop(key, None)
            return None
        return list(entry.payload)

    def put_search(self, key: str, songs: list[Song]) -> None:
        self._search[key] = CacheEntry(payload=tuple(songs), created_at=self._clock())

    # --- popular cache ---

    def get_popular(self) -> list[Song] | None:
        entry = self._popular
        if entry is None:
            return None
        if not entry.is_fresh(now=self._clock(), ttl_seconds=self._popular_ttl_seconds):
            self._popular = None
            return None
        return list(entry.payload)

    def put_popular(self, songs: list[Song]) -> None:
        self._popular = CacheEntry(payload=tuple(songs), created_at=self._clock())

    # --- maintenance ---

    @property
    def search_size(self) -> int:
        return len(self._search)

    def sweep(self) -> int:
        """
        Remove every expired entry. Returns the number of entries removed.
        """
        now = self._clock()
        removed = 0
        for key, entry in list(self._search.items()):
            if not entry.is_fresh(now=now, ttl_seconds=self._search_ttl_seconds):
                del self._search[key]
                removed += 1

        popular = self._popular
        if popular is not None and not popular.is_fresh(now=now, ttl_seconds=self._popular_ttl_seconds):
            self._popular = None
            removed += 1

        if removed:
            logger.info("Cache sweep removed %d expired entries", removed)
        return removed

    @property
    def is_running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start(self) -> None:
        """
        Start the periodic sweep on the running event loop. No-op if already running.
        """
        if self.is_running:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop(), name="song-cache-sweep")
        logger.info("Cache sweep started. Interval=%.0fs", self._sweep_interval_seconds)

    async def stop(self) -> None:
        task = self._sweep_task
        self._sweep_task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Cache sweep stopped")

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval_seconds)
            try:
                self.sweep()
            except Exception:
                logger.exception("Cache sweep error")
