from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from notetune_core.use_cases.catalog_query import CatalogQueryService
from notetune_core.use_cases.resolve_song_link import ResolveSongLink

from notetune_infra.http.fetch import HttpxJsonFetcher
from notetune_infra.http.retry import RetryingJsonFetcher
from notetune_infra.itunes.client import ItunesCatalogClient
from notetune_infra.oembed.client import HttpxOEmbedClient
from notetune_infra.settings import NotetuneSettings
from notetune_infra.song_cache import InMemorySongCache


@dataclass(frozen=True)
class SongServices:
    catalog: CatalogQueryService
    links: ResolveSongLink
    cache: InMemorySongCache


def build_song_services(
    settings: NotetuneSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SongServices:
    """
    Compose fetcher -> retry -> adapters -> use cases from settings.

    The cache sweep is not started here; see song_services().
    """
    fetcher = RetryingJsonFetcher(
        HttpxJsonFetcher(
            timeout_seconds=settings.http_timeout_seconds,
            user_agent=settings.http_user_agent,
            transport=transport,
        ),
        max_retries=settings.http_max_retries,
        retry_delay_seconds=settings.http_retry_delay_seconds,
    )
    cache = InMemorySongCache(
        search_ttl_seconds=settings.search_cache_ttl_seconds,
        popular_ttl_seconds=settings.popular_cache_ttl_seconds,
        sweep_interval_seconds=settings.cache_sweep_interval_seconds,
    )
    catalog = CatalogQueryService(
        catalog_client=ItunesCatalogClient(fetcher=fetcher, search_url=settings.catalog_search_url),
        cache=cache,
    )
    links = ResolveSongLink(
        embed_client=HttpxOEmbedClient(
            fetcher=fetcher,
            youtube_oembed_url=settings.youtube_oembed_url,
            spotify_oembed_url=settings.spotify_oembed_url,
        )
    )
    return SongServices(catalog=catalog, links=links, cache=cache)


@asynccontextmanager
async def song_services(
    settings: NotetuneSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[SongServices]:
    """
    Build the services and keep the cache sweep running for the lifetime of the block.
    """
    services = build_song_services(settings, transport=transport)
    services.cache.start()
    try:
        yield services
    finally:
        await services.cache.stop()
