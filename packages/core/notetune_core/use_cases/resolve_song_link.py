# packages/core/notetune_core/use_cases/resolve_song_link.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from notetune_core.ports.links import CLIP_SECONDS, EmbedClient, SongData, SongSource

logger = logging.getLogger(__name__)

UNKNOWN_TITLE: Final = "Unknown"
UNKNOWN_ARTIST: Final = "Unknown Artist"

# --- Share link patterns ---
_YOUTUBE_URL_RE: Final[re.Pattern[str]] = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/)(?P<video_id>[a-zA-Z0-9_-]{11})"
)
_YOUTUBE_START_RE: Final[re.Pattern[str]] = re.compile(r"[?&]t=(?P<seconds>\d+)")
_SPOTIFY_URL_RE: Final[re.Pattern[str]] = re.compile(r"spotify\.com/track/(?P<track_id>[a-zA-Z0-9]+)")

_YOUTUBE_SEPARATOR: Final = "-"
_SPOTIFY_SEPARATOR: Final = "·"


@dataclass(frozen=True)
class YouTubeLink:
    video_id: str
    start_time: int | None = None


@dataclass(frozen=True)
class SpotifyLink:
    track_id: str


def parse_youtube_url(url: str) -> YouTubeLink | None:
    """
    Recognize youtube.com/watch?v=<id> and youtu.be/<id> links.

    An optional t=<seconds> query parameter becomes the start time.
    """
    m = _YOUTUBE_URL_RE.search(url)
    if not m:
        return None
    m_start = _YOUTUBE_START_RE.search(url)
    start_time = int(m_start.group("seconds")) if m_start else None
    return YouTubeLink(video_id=m.group("video_id"), start_time=start_time)


def parse_spotify_url(url: str) -> SpotifyLink | None:
    m = _SPOTIFY_URL_RE.search(url)
    return SpotifyLink(track_id=m.group("track_id")) if m else None


def youtube_thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def split_youtube_title(title: str) -> tuple[str, str]:
    """
    "<artist> - <title>" -> (title, artist).

    The title is the piece between the first and second hyphen, so
    "A - B - C" gives ("B", "A"). Without a separator the whole string is the title.
    """
    whole = title.strip() or UNKNOWN_TITLE
    parts = [p.strip() for p in title.split(_YOUTUBE_SEPARATOR)]
    if len(parts) < 2:
        return whole, UNKNOWN_ARTIST
    return parts[1] or whole, parts[0] or UNKNOWN_ARTIST


def split_spotify_title(title: str | None) -> tuple[str, str]:
    """
    "<title> · <artist>" -> (title, artist), split on the first middle dot.
    """
    if not title:
        return UNKNOWN_TITLE, UNKNOWN_ARTIST
    head, sep, tail = title.partition(_SPOTIFY_SEPARATOR)
    head, tail = head.strip(), tail.strip()
    if not sep or not head or not tail:
        return title.strip() or UNKNOWN_TITLE, UNKNOWN_ARTIST
    return head, tail


class ResolveSongLink:
    """
    Core use-case: turn a pasted share link into an attached song.

    Flow:
    - Unrecognized link -> None (no network call)
    - Recognized -> fetch embed metadata via EmbedClient port
    - Embed fetch failed -> None
    - Otherwise -> SongData with a 30 second playback window

    Link resolution degrades silently; messaging is the caller's job.
    """

    def __init__(self, *, embed_client: EmbedClient) -> None:
        self._embed_client = embed_client

    async def execute(self, url: str) -> SongData | None:
        youtube = parse_youtube_url(url)
        if youtube is not None:
            return await self._resolve_youtube(youtube)

        spotify = parse_spotify_url(url)
        if spotify is not None:
            return await self._resolve_spotify(spotify)

        logger.info("Unrecognized song link: %s", url)
        return None

    async def _resolve_youtube(self, link: YouTubeLink) -> SongData | None:
        meta = await self._embed_client.fetch_youtube(link.video_id)
        if meta is None:
            logger.warning("No embed metadata for YouTube video %s", link.video_id)
            return None

        title, artist = split_youtube_title(meta.title or "")
        start_time = link.start_time or 0
        return SongData(
            source=SongSource.YOUTUBE,
            source_id=link.video_id,
            title=title,
            artist=artist,
            cover_url=meta.thumbnail_url or youtube_thumbnail_url(link.video_id),
            start_time=start_time,
            end_time=start_time + CLIP_SECONDS,
        )

    async def _resolve_spotify(self, link: SpotifyLink) -> SongData | None:
        meta = await self._embed_client.fetch_spotify(link.track_id)
        if meta is None:
            logger.warning("No embed metadata for Spotify track %s", link.track_id)
            return None

        title, artist = split_spotify_title(meta.title)
        return SongData(
            source=SongSource.SPOTIFY,
            source_id=link.track_id,
            title=title,
            artist=artist,
            cover_url=meta.thumbnail_url,
            start_time=0,
            end_time=CLIP_SECONDS,
        )
