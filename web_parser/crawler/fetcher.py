# web_parser/crawler/fetcher.py
"""
Fetcher module: HTTP GET with a shared permit pool, retry/backoff and timeout.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Sequence

from aiohttp import ClientError, ClientSession

from web_parser.config import ParserSettings
from web_parser.crawler.limiter import ConcurrencyLimiter
from web_parser.crawler.models import FetchOutcome

__all__ = ("Fetcher", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
_TEXTUAL_MARKERS = ("html", "xml", "text", "json")


def _is_textual(content_type: str) -> bool:
    return not content_type or any(m in content_type for m in _TEXTUAL_MARKERS)


class Fetcher:
    """Fetches pages; failures are returned as data, never raised."""

    def __init__(
        self,
        session: ClientSession,
        settings: ParserSettings,
        limiter: ConcurrencyLimiter,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.session = session
        self.settings = settings
        self.limiter = limiter
        self._retry_status = retry_status
        self.logger = logging.getLogger("WebParser")

    async def fetch(self, url: str) -> FetchOutcome:
        """
        GET *url* while holding one fetch permit.

        5xx and 429 are retried ``retry_times`` times with exponential backoff;
        the permit is released while sleeping so other branches keep going.
        """
        attempts = 0
        while True:
            try:
                async with self.limiter:
                    async with self.session.get(url, raise_for_status=False) as resp:
                        status = resp.status
                        reason = resp.reason or ""
                        if status in self._retry_status and attempts < self.settings.retry_times:
                            raise ClientError(f"retryable status {status}")
                        if 200 <= status < 300:
                            ctype = resp.headers.get("Content-Type", "").lower()
                            # binary bodies (images, archives) carry no text and no links
                            text = await resp.text(errors="replace") if _is_textual(ctype) else ""
                            return FetchOutcome(url, status=status, reason=reason, content=text)
                        self.logger.error("HTTP error for %s: %s %s", url, status, reason)
                        return FetchOutcome(url, status=status, reason=reason)
            except asyncio.TimeoutError:
                self.logger.warning("Timeout fetching %s", url)
                return FetchOutcome(url, error=f"timeout after {self.settings.timeout:g} s")
            except ClientError as exc:
                attempts += 1
                if attempts > self.settings.retry_times:
                    self.logger.warning("Failed %s: %s", url, exc)
                    return FetchOutcome(url, error=str(exc) or exc.__class__.__name__)
                backoff = min(60, 2 ** attempts + random.random())
                self.logger.debug(
                    "Retry %d/%d for %s after %.2f s", attempts, self.settings.retry_times, url, backoff
                )
                await asyncio.sleep(backoff)
