from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 8.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Notetune/1.0)"


class FetchOutcome(str, Enum):
    SUCCESS = "success"
    TRANSIENT_FAILURE = "transient_failure"
    CANCELLED_BY_TIMEOUT = "cancelled_by_timeout"


@dataclass(frozen=True)
class FetchResult:
    """
    Result of a single JSON fetch.

    payload is only meaningful when outcome is SUCCESS.
    """
    outcome: FetchOutcome
    payload: Any = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is FetchOutcome.SUCCESS


class HttpxJsonFetcher:
    """
    Single-shot JSON GET with a hard timeout.

    Never raises for network problems; failures are classified into a
    FetchResult so the retry layer can tell a timeout from a generic failure.
    Caller cancellation (asyncio.CancelledError) propagates unchanged.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._timeout = httpx.Timeout(timeout_seconds)
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._transport = transport

    async def fetch(self, url: str, *, params: Mapping[str, Any] | None = None) -> FetchResult:
        """
        Fetch and decode a JSON document.

        Args:
            url: Endpoint URL.
            params: Optional query parameters.

        Returns:
            FetchResult tagged SUCCESS, TRANSIENT_FAILURE or CANCELLED_BY_TIMEOUT.
        """
        try:
            return await asyncio.wait_for(self._get_json(url, params), timeout=self._timeout_seconds)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Timed out after %.1fs fetching %s", self._timeout_seconds, url)
            return FetchResult(FetchOutcome.CANCELLED_BY_TIMEOUT, detail=str(exc) or "timeout")
        except httpx.HTTPStatusError as exc:
            logger.warning("HTTP %s from %s", exc.response.status_code, url)
            return FetchResult(FetchOutcome.TRANSIENT_FAILURE, detail=f"HTTP {exc.response.status_code}")
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Failed to fetch %s: %s", url, exc)
            return FetchResult(FetchOutcome.TRANSIENT_FAILURE, detail=str(exc))

    async def _get_json(self, url: str, params: Mapping[str, Any] | None) -> FetchResult:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            headers=self._headers,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            resp = await client.get(url, params=params)
            resp.raise_for_status()
            return FetchResult(FetchOutcome.SUCCESS, payload=resp.json())
