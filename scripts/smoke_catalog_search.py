# scripts/smoke_catalog_search.py
from __future__ import annotations

import asyncio
import logging
import sys

from notetune_core.ports.catalog import Song
from notetune_infra.services import song_services
from notetune_infra.settings import load_settings


def _describe(song: Song) -> str:
    return f"[{song.id}] {song.title} - {song.artist} ({song.duration_seconds}s)"


async def main() -> None:
    """
    Smoke test for the catalog query service against the live iTunes API.

    Usage:
        PYTHONPATH=packages/core:packages/infra \
        python scripts/smoke_catalog_search.py            # popular songs
        python scripts/smoke_catalog_search.py "daft punk" # search
    """
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) > 2:
        raise SystemExit("Usage: python scripts/smoke_catalog_search.py [query]")

    async with song_services(load_settings()) as services:
        if len(sys.argv) == 2:
            query = sys.argv[1]
            songs = await services.catalog.search_songs(query)
            # Second call should be served from the cache (no "Catalog search" log line).
            again = await services.catalog.search_songs(query)
            print("Query:", query)
        else:
            songs = await services.catalog.get_popular_songs()
            again = await services.catalog.get_popular_songs()
            print("Popular songs")

        print("Count:", len(songs))
        for song in songs:
            print(" ", _describe(song))

        if songs != again:
            raise SystemExit("Second lookup differed from the first. Cache is not being used.")


if __name__ == "__main__":
    asyncio.run(main())
