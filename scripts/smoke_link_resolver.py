# scripts/smoke_link_resolver.py
from __future__ import annotations

import asyncio
import json
import logging
import sys

from notetune_core.contracts import SongDataDTO
from notetune_infra.services import song_services
from notetune_infra.settings import load_settings


async def main() -> None:
    """
    Smoke test for share-link resolution.

    Usage:
        PYTHONPATH=packages/core:packages/infra \
        python scripts/smoke_link_resolver.py "https://youtu.be/dQw4w9WgXcQ?t=43"
    """
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) != 2:
        raise SystemExit("Usage: python scripts/smoke_link_resolver.py <share_url>")

    url = sys.argv[1]
    async with song_services(load_settings()) as services:
        data = await services.links.execute(url)

    if data is None:
        raise SystemExit(f"No song found for {url}")

    print("Source:", data.source.value)
    print("Id:", data.source_id)
    print("Title:", data.title)
    print("Artist:", data.artist)
    print("Cover:", data.cover_url)
    print("Window:", f"{data.start_time}s..{data.end_time}s")
    print("Note field:")
    print(json.dumps(SongDataDTO.from_song_data(data).to_field(), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
