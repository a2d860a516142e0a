import asyncio

import pytest

from notetune_core.ports.catalog import CatalogClient, Song
from notetune_core.use_cases.catalog_query import (
    FALLBACK_SONGS,
    CatalogQueryService,
    PopularQuery,
)
from notetune_infra.song_cache import InMemorySongCache


def _song(track_id: int, *, title: str | None = None, artist: str = "Artist") -> Song:
    return Song(
        id=track_id,
        title=title or f"Song {track_id}",
        artist=artist,
        album="",
        cover_url="",
        preview_url=f"https://p/{track_id}.m4a",
    )


class FakeCatalogClient(CatalogClient):
    """
    Canned responses per search term. An Exception value is raised instead of returned.
    """

    def __init__(self, responses: dict[str, list[Song] | Exception] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[str, int]] = []

    async def search(self, term: str, *, limit: int) -> list[Song]:
        self.calls.append((term, limit))
        response = self.responses.get(term, [])
        if isinstance(response, Exception):
            raise response
        return list(response)


def _service(client: FakeCatalogClient, clock, **kwargs) -> CatalogQueryService:
    return CatalogQueryService(catalog_client=client, cache=InMemorySongCache(clock=clock), **kwargs)


# --- search ---


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", " ", "a", "  b  "])
async def test_short_queries_skip_the_network(query: str, clock) -> None:
    client = FakeCatalogClient()

    assert await _service(client, clock).search_songs(query) == []
    assert client.calls == []


@pytest.mark.asyncio
async def test_search_within_ttl_hits_cache(clock) -> None:
    client = FakeCatalogClient({"Daft Punk": [_song(1), _song(2)]})
    service = _service(client, clock)

    first = await service.search_songs("  Daft Punk ")
    clock.advance(60)
    second = await service.search_songs("daft punk")

    assert first == second == [_song(1), _song(2)]
    assert client.calls == [("Daft Punk", 15)]


@pytest.mark.asyncio
async def test_search_refetches_once_after_ttl(clock) -> None:
    client = FakeCatalogClient({"abba": [_song(1)]})
    service = _service(client, clock)

    await service.search_songs("abba")
    clock.advance(30 * 60)
    await service.search_songs("abba")
    await service.search_songs("abba")

    assert len(client.calls) == 2


@pytest.mark.asyncio
async def test_search_dedupes_results(clock) -> None:
    client = FakeCatalogClient({"abba": [_song(1), _song(2), _song(1, title="Dupe")]})

    songs = await _service(client, clock).search_songs("abba")

    assert [s.id for s in songs] == [1, 2]
    assert songs[0].title == "Song 1"


@pytest.mark.asyncio
async def test_search_falls_back_to_matching_builtin_songs(clock) -> None:
    client = FakeCatalogClient()
    service = _service(client, clock)

    assert await service.search_songs("ED SHEERAN") == list(FALLBACK_SONGS)
    assert await service.search_songs("shape of") == list(FALLBACK_SONGS)
    assert await service.search_songs("nothing like this") == []


@pytest.mark.asyncio
async def test_empty_search_result_is_not_cached(clock) -> None:
    client = FakeCatalogClient()
    service = _service(client, clock)

    await service.search_songs("abba")
    await service.search_songs("abba")

    assert len(client.calls) == 2


# --- popular ---


@pytest.mark.asyncio
async def test_popular_issues_predetermined_queries(clock) -> None:
    client = FakeCatalogClient({"top hits 2024": [_song(1)]})

    await _service(client, clock).get_popular_songs()

    assert client.calls == [("top hits 2024", 8), ("arijit singh", 4), ("ed sheeran", 4)]


@pytest.mark.asyncio
async def test_popular_dedupes_in_first_seen_order(clock) -> None:
    client = FakeCatalogClient(
        {
            "top hits 2024": [_song(1), _song(2), _song(3)],
            "arijit singh": [_song(2, title="Other"), _song(4)],
            "ed sheeran": [_song(4), _song(5), _song(1)],
        }
    )

    songs = await _service(client, clock).get_popular_songs()

    assert [s.id for s in songs] == [1, 2, 3, 4, 5]
    assert songs[1].title == "Song 2"


@pytest.mark.asyncio
async def test_popular_is_capped_at_fifteen(clock) -> None:
    client = FakeCatalogClient(
        {
            "a": [_song(i) for i in range(0, 10)],
            "b": [_song(i) for i in range(5, 20)],
        }
    )
    service = _service(client, clock, popular_queries=[PopularQuery("a", 10), PopularQuery("b", 15)])

    songs = await service.get_popular_songs()

    assert [s.id for s in songs] == list(range(15))


@pytest.mark.asyncio
async def test_popular_survives_one_failed_query(clock) -> None:
    client = FakeCatalogClient(
        {
            "top hits 2024": [_song(1), _song(2)],
            "arijit singh": ConnectionError("network down"),
            "ed sheeran": [_song(2), _song(3)],
        }
    )

    songs = await _service(client, clock).get_popular_songs()

    assert [s.id for s in songs] == [1, 2, 3]


@pytest.mark.asyncio
async def test_popular_queries_run_concurrently(clock) -> None:
    gate = asyncio.Event()
    started: list[str] = []

    class GatedClient(CatalogClient):
        async def search(self, term: str, *, limit: int) -> list[Song]:
            started.append(term)
            await gate.wait()
            return [_song(len(started))] if term == "ed sheeran" else []

    service = CatalogQueryService(catalog_client=GatedClient(), cache=InMemorySongCache(clock=clock))
    task = asyncio.create_task(service.get_popular_songs())
    for _ in range(10):
        await asyncio.sleep(0)

    assert len(started) == 3
    assert not task.done()

    gate.set()
    songs = await task
    assert len(songs) == 1


@pytest.mark.asyncio
async def test_popular_falls_back_when_everything_fails(clock) -> None:
    client = FakeCatalogClient(
        {
            "top hits 2024": ConnectionError("down"),
            "arijit singh": TimeoutError("slow"),
        }
    )
    service = _service(client, clock)

    assert await service.get_popular_songs() == list(FALLBACK_SONGS)
    # Fallback results are not cached; the next call tries the network again.
    await service.get_popular_songs()
    assert len(client.calls) == 6


@pytest.mark.asyncio
async def test_popular_cached_for_two_hours(clock) -> None:
    client = FakeCatalogClient({"top hits 2024": [_song(1)]})
    service = _service(client, clock)

    first = await service.get_popular_songs()
    clock.advance(2 * 60 * 60 - 1)
    second = await service.get_popular_songs()

    assert first == second == [_song(1)]
    assert len(client.calls) == 3

    clock.advance(1)
    await service.get_popular_songs()
    assert len(client.calls) == 6
