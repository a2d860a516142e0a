from __future__ import annotations

import logging
from typing import Final

from notetune_core.ports.catalog import CatalogClient, Song

from notetune_infra.http.retry import RetryingJsonFetcher
from notetune_infra.itunes.normalizer import normalize_itunes_response

logger = logging.getLogger(__name__)

ITUNES_SEARCH_URL: Final = "https://itunes.apple.com/search"


class ItunesCatalogClient(CatalogClient):
    """
    iTunes Search API adapter.

    Network failures and malformed payloads both come back as an empty list.
    """

    def __init__(self, *, fetcher: RetryingJsonFetcher, search_url: str = ITUNES_SEARCH_URL) -> None:
        self._fetcher = fetcher
        self._search_url = search_url

    async def search(self, term: str, *, limit: int) -> list[Song]:
        params = {
            "term": term,
            "media": "music",
            "entity": "song",
            "limit": limit,
        }
        raw = await self._fetcher.fetch_json(self._search_url, params=params)
        if raw is None:
            logger.warning("No catalog data for %r", term)
            return []
        songs = normalize_itunes_response(raw)
        logger.info("Catalog search %r returned %d playable songs", term, len(songs))
        return songs
