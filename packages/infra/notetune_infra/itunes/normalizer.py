from __future__ import annotations

from typing import Any, Final

from notetune_core.ports.catalog import Song

MAX_TEXT_LENGTH: Final = 100
DEFAULT_DURATION_MS: Final = 30_000

_LOW_RES_ARTWORK: Final = "100x100"
_HIGH_RES_ARTWORK: Final = "300x300"


def _clip(value: Any, default: str) -> str:
    text = value if isinstance(value, str) and value else default
    return text[:MAX_TEXT_LENGTH]


def _upgrade_artwork(url: Any) -> str:
    if not isinstance(url, str) or not url:
        return ""
    return url.replace(_LOW_RES_ARTWORK, _HIGH_RES_ARTWORK)


def _duration_seconds(millis: Any) -> int:
    if isinstance(millis, bool) or not isinstance(millis, (int, float)) or millis <= 0:
        millis = DEFAULT_DURATION_MS
    return int(millis // 1000)


def _is_valid_track_id(track_id: Any) -> bool:
    if isinstance(track_id, bool):
        return False
    return isinstance(track_id, int) or (isinstance(track_id, str) and bool(track_id))


def _is_playable_track(item: Any) -> bool:
    return (
        isinstance(item, dict)
        and item.get("kind") == "song"
        and _is_valid_track_id(item.get("trackId"))
        and isinstance(item.get("previewUrl"), str)
        and bool(item["previewUrl"])
    )


def normalize_itunes_response(raw: Any) -> list[Song]:
    """
    Map an iTunes Search API response into Songs.

    Malformed input yields an empty list. Entries that are not songs, or have
    no preview URL, are dropped.
    """
    if not isinstance(raw, dict):
        return []
    results = raw.get("results")
    if not isinstance(results, list) or not results:
        return []

    return [
        Song(
            id=item["trackId"],
            title=_clip(item.get("trackName"), "Unknown"),
            artist=_clip(item.get("artistName"), "Unknown Artist"),
            album=_clip(item.get("collectionName"), ""),
            cover_url=_upgrade_artwork(item.get("artworkUrl100")),
            preview_url=item["previewUrl"],
            duration_seconds=_duration_seconds(item.get("trackTimeMillis")),
        )
        for item in results
        if _is_playable_track(item)
    ]
