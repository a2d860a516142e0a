# packages/core/notetune_core/use_cases/catalog_query.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final

from notetune_core.ports.catalog import CatalogClient, Song
from notetune_core.ports.song_cache import SongCache

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH: Final = 2
SEARCH_RESULT_LIMIT: Final = 15
POPULAR_RESULT_LIMIT: Final = 15


@dataclass(frozen=True)
class PopularQuery:
    term: str
    limit: int


DEFAULT_POPULAR_QUERIES: Final[tuple[PopularQuery, ...]] = (
    PopularQuery(term="top hits 2024", limit=8),
    PopularQuery(term="arijit singh", limit=4),
    PopularQuery(term="ed sheeran", limit=4),
)

# Served when every network path fails. Only entries with a preview URL are kept.
FALLBACK_SONGS: Final[tuple[Song, ...]] = (
    Song(
        id=1440818839,
        title="Shape of You",
        artist="Ed Sheeran",
        album="÷",
        cover_url=(
            "https://is1-ssl.mzstatic.com/image/thumb/Music125/v4/3f/84/14/"
            "3f841469-7404-6b98-a8f9-4f8b1a3c3d4b/source/300x300bb.jpg"
        ),
        preview_url=(
            "https://audio-ssl.itunes.apple.com/itunes-assets/AudioPreview116/v4/ab/86/52/"
            "ab8652a7-62d0-9fba-1f28-7a92c8d18518/mzaf_12184443632225615168.plus.aac.p.m4a"
        ),
        duration_seconds=234,
    ),
)


def normalize_query_key(query: str) -> str:
    return query.strip().lower()


def dedupe_songs(songs: Iterable[Song]) -> list[Song]:
    """
    De-duplicate by Song.id while preserving first-seen order.
    """
    seen: set[int | str] = set()
    out: list[Song] = []
    for song in songs:
        if song.id in seen:
            continue
        seen.add(song.id)
        out.append(song)
    return out


def filter_fallback_songs(key: str, songs: Sequence[Song] = FALLBACK_SONGS) -> list[Song]:
    return [s for s in songs if key in s.title.lower() or key in s.artist.lower()]


class CatalogQueryService:
    """
    Cache-first access to the song catalog.

    - Popular songs: a fixed set of queries issued concurrently, merged,
      de-duplicated and cached as one slot.
    - Search: one query per normalized key, cached per key.

    Network trouble never surfaces here; it shows up as an empty catalog result
    and we answer from the built-in fallback list instead.
    """

    def __init__(
        self,
        *,
        catalog_client: CatalogClient,
        cache: SongCache,
        popular_queries: Sequence[PopularQuery] = DEFAULT_POPULAR_QUERIES,
        fallback_songs: Sequence[Song] = FALLBACK_SONGS,
    ) -> None:
        self._catalog_client = catalog_client
        self._cache = cache
        self._popular_queries = tuple(popular_queries)
        self._fallback_songs = tuple(fallback_songs)

    async def get_popular_songs(self) -> list[Song]:
        cached = self._cache.get_popular()
        if cached:
            return cached

        results = await asyncio.gather(
            *(self._catalog_client.search(q.term, limit=q.limit) for q in self._popular_queries),
            return_exceptions=True,
        )

        collected: list[Song] = []
        for query, result in zip(self._popular_queries, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.warning("Popular query %r failed: %s", query.term, result)
                continue
            collected.extend(result)

        songs = dedupe_songs(collected)[:POPULAR_RESULT_LIMIT]
        if songs:
            logger.info("Refreshed popular songs cache with %d songs", len(songs))
            self._cache.put_popular(songs)
            return list(songs)

        logger.warning("No popular songs available; serving fallback list")
        return list(self._fallback_songs)

    async def search_songs(self, query: str) -> list[Song]:
        trimmed = query.strip()
        if len(trimmed) < MIN_QUERY_LENGTH:
            return []

        key = normalize_query_key(trimmed)
        cached = self._cache.get_search(key)
        if cached is not None:
            return cached

        songs = dedupe_songs(await self._catalog_client.search(trimmed, limit=SEARCH_RESULT_LIMIT))
        if songs:
            self._cache.put_search(key, songs)
            return list(songs)

        return filter_fallback_songs(key, self._fallback_songs)
