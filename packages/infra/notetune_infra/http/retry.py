from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Mapping, Protocol

from notetune_infra.http.fetch import FetchOutcome, FetchResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_DELAY_SECONDS = 0.5


class JsonFetcher(Protocol):
    async def fetch(self, url: str, *, params: Mapping[str, Any] | None = None) -> FetchResult: ...


class RetryingJsonFetcher:
    """
    Fixed-delay retry around a JsonFetcher.

    - TRANSIENT_FAILURE: retried up to max_retries times, delay between attempts.
    - CANCELLED_BY_TIMEOUT: returned as "no data" right away, no retry consumed.
    - Exhausted retries: None. Callers treat None as "no data available".
    """

    def __init__(
        self,
        fetcher: JsonFetcher,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._fetcher = fetcher
        self._max_retries = max_retries
        self._retry_delay_seconds = retry_delay_seconds
        self._sleep = sleep

    async def fetch_json(self, url: str, *, params: Mapping[str, Any] | None = None) -> Any | None:
        attempts = self._max_retries + 1
        for attempt in range(1, attempts + 1):
            result = await self._fetcher.fetch(url, params=params)

            if result.outcome is FetchOutcome.SUCCESS:
                return result.payload

            if result.outcome is FetchOutcome.CANCELLED_BY_TIMEOUT:
                logger.warning("Giving up on %s after timeout (attempt %d)", url, attempt)
                return None

            if attempt < attempts:
                logger.info(
                    "Retrying %s in %.2fs (attempt %d/%d failed: %s)",
                    url,
                    self._retry_delay_seconds,
                    attempt,
                    attempts,
                    result.detail,
                )
                await self._sleep(self._retry_delay_seconds)

        logger.warning("Giving up on %s after %d attempts", url, attempts)
        return None
