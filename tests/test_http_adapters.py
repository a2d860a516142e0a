import httpx
import pytest

from notetune_infra.http.fetch import HttpxJsonFetcher
from notetune_infra.http.retry import RetryingJsonFetcher
from notetune_infra.itunes.client import ItunesCatalogClient
from notetune_infra.oembed.client import HttpxOEmbedClient


async def _no_sleep(delay: float) -> None:
    return None


def _retrying(handler) -> RetryingJsonFetcher:
    return RetryingJsonFetcher(
        HttpxJsonFetcher(transport=httpx.MockTransport(handler)),
        sleep=_no_sleep,
    )


@pytest.mark.asyncio
async def test_itunes_client_sends_search_params_and_normalizes() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "results": [
                    {"kind": "song", "trackId": 1, "trackName": "One", "previewUrl": "https://p/1.m4a"},
                    {"kind": "song", "trackId": 2, "trackName": "Two"},
                ]
            },
        )

    songs = await ItunesCatalogClient(fetcher=_retrying(handler)).search("daft punk", limit=15)

    assert [s.id for s in songs] == [1]
    params = seen[0].url.params
    assert seen[0].url.host == "itunes.apple.com"
    assert params["term"] == "daft punk"
    assert params["media"] == "music"
    assert params["entity"] == "song"
    assert params["limit"] == "15"


@pytest.mark.asyncio
async def test_itunes_client_returns_empty_after_retries() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500)

    assert await ItunesCatalogClient(fetcher=_retrying(handler)).search("abba", limit=4) == []
    assert calls == 3


@pytest.mark.asyncio
async def test_oembed_youtube_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"title": "Artist - Title", "thumbnail_url": "https://i/x.jpg"})

    meta = await HttpxOEmbedClient(fetcher=_retrying(handler)).fetch_youtube("dQw4w9WgXcQ")

    assert meta is not None
    assert meta.title == "Artist - Title"
    assert meta.thumbnail_url == "https://i/x.jpg"
    assert seen[0].url.host == "www.youtube.com"
    assert seen[0].url.params["url"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert seen[0].url.params["format"] == "json"


@pytest.mark.asyncio
async def test_oembed_spotify_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"title": "Song · Artist", "thumbnail_url": 42})

    meta = await HttpxOEmbedClient(fetcher=_retrying(handler)).fetch_spotify("abc123")

    assert meta is not None
    assert meta.title == "Song · Artist"
    assert meta.thumbnail_url is None
    assert seen[0].url.host == "open.spotify.com"
    assert seen[0].url.params["url"] == "https://open.spotify.com/track/abc123"


@pytest.mark.asyncio
async def test_oembed_non_object_payload_is_nothing() -> None:
    meta = await HttpxOEmbedClient(fetcher=_retrying(lambda r: httpx.Response(200, json=["x"]))).fetch_spotify(
        "abc123"
    )

    assert meta is None
