from __future__ import annotations

import logging
import time
from typing import List, Optional

import httpx

from .normalize import Record, decode_csv_bytes, parse_csv
from .rules import CACHE_BUSTER_PARAM, REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a sheet export cannot be downloaded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class SheetFetcher:
    """
    Downloads published spreadsheet exports.

    Every request carries a fresh timestamp query parameter so neither
    the spreadsheet host nor an intermediate cache serves a stale export.
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    async def fetch_text(self, url: str) -> str:
        # Merged into the existing query; the export needs its output=csv
        try:
            request_url = httpx.URL(url).copy_merge_params({CACHE_BUSTER_PARAM: str(int(time.time() * 1000))})
            response = await self._client.get(request_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(url, f"HTTP error! status: {exc.response.status_code}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

        text, encoding = decode_csv_bytes(response.content)
        logger.debug("Fetched %d bytes from %s (%s)", len(response.content), url, encoding)
        return text

    async def fetch_records(self, url: str) -> List[Record]:
        return parse_csv(await self.fetch_text(url))

    async def aclose(self) -> None:
        await self._client.aclose()
