from __future__ import annotations

from typing import Any, Final

from notetune_core.ports.links import EmbedClient, EmbedMetadata

from notetune_infra.http.retry import RetryingJsonFetcher

YOUTUBE_OEMBED_URL: Final = "https://www.youtube.com/oembed"
SPOTIFY_OEMBED_URL: Final = "https://open.spotify.com/oembed"


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _parse_embed(raw: Any) -> EmbedMetadata | None:
    if not isinstance(raw, dict):
        return None
    return EmbedMetadata(
        title=_string_or_none(raw.get("title")),
        thumbnail_url=_string_or_none(raw.get("thumbnail_url")),
    )


class HttpxOEmbedClient(EmbedClient):
    """
    oEmbed lookups for YouTube videos and Spotify tracks.

    Returns None when the endpoint gives us nothing usable.
    """

    def __init__(
        self,
        *,
        fetcher: RetryingJsonFetcher,
        youtube_oembed_url: str = YOUTUBE_OEMBED_URL,
        spotify_oembed_url: str = SPOTIFY_OEMBED_URL,
    ) -> None:
        self._fetcher = fetcher
        self._youtube_oembed_url = youtube_oembed_url
        self._spotify_oembed_url = spotify_oembed_url

    async def fetch_youtube(self, video_id: str) -> EmbedMetadata | None:
        raw = await self._fetcher.fetch_json(
            self._youtube_oembed_url,
            params={"url": f"https://www.youtube.com/watch?v={video_id}", "format": "json"},
        )
        return _parse_embed(raw)

    async def fetch_spotify(self, track_id: str) -> EmbedMetadata | None:
        raw = await self._fetcher.fetch_json(
            self._spotify_oembed_url,
            params={"url": f"https://open.spotify.com/track/{track_id}"},
        )
        return _parse_embed(raw)
