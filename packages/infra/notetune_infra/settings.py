# packages/infra/notetune_infra/settings.py
from __future__ import annotations

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotetuneSettings(BaseSettings):
    """
    Song-layer configuration loaded from environment variables and (in local dev) a .env file.

    Every value has a production default; override only what you need, e.g.
    HTTP_TIMEOUT_SECONDS=4 or SEARCH_CACHE_TTL_SECONDS=60 for local testing.
    """

    catalog_search_url: str = Field(default="https://itunes.apple.com/search", alias="CATALOG_SEARCH_URL")
    youtube_oembed_url: str = Field(default="https://www.youtube.com/oembed", alias="YOUTUBE_OEMBED_URL")
    spotify_oembed_url: str = Field(default="https://open.spotify.com/oembed", alias="SPOTIFY_OEMBED_URL")

    http_timeout_seconds: float = Field(default=8.0, gt=0, alias="HTTP_TIMEOUT_SECONDS")
    http_max_retries: int = Field(default=2, ge=0, alias="HTTP_MAX_RETRIES")
    http_retry_delay_seconds: float = Field(default=0.5, ge=0, alias="HTTP_RETRY_DELAY_SECONDS")
    http_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; Notetune/1.0)", alias="HTTP_USER_AGENT"
    )

    search_cache_ttl_seconds: float = Field(default=30 * 60, gt=0, alias="SEARCH_CACHE_TTL_SECONDS")
    popular_cache_ttl_seconds: float = Field(default=2 * 60 * 60, gt=0, alias="POPULAR_CACHE_TTL_SECONDS")
    cache_sweep_interval_seconds: float = Field(default=10 * 60, gt=0, alias="CACHE_SWEEP_INTERVAL_SECONDS")

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> NotetuneSettings:
    """
    Load and validate settings. Raises a RuntimeError with a readable message on failure.
    """
    try:
        return NotetuneSettings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid notetune configuration: {exc}") from exc
