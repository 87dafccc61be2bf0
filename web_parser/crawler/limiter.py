# web_parser/crawler/limiter.py
"""
Counting permit pool for the crawler.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

__all__ = ("ConcurrencyLimiter",)


class ConcurrencyLimiter:
    """Async context manager around :class:`asyncio.Semaphore`.

    ``async with limiter:`` waits for a permit and always gives it back,
    also when the body raises. ``in_flight`` counts the holders right now and
    ``peak`` the highest value seen, which the tests use to check the bound.
    """

    def __init__(self, size: int, name: str = "limiter") -> None:
        if size < 1:
            raise ValueError(f"{name} size must be >= 1, got {size}")
        self.size = size
        self.name = name
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self.in_flight = 0
        self.peak = 0
        self.logger = logging.getLogger("WebParser")

    def _sem(self) -> asyncio.Semaphore:
        # a semaphore is tied to the loop it first waited on; an idle limiter
        # reused from a new asyncio.run() gets a fresh one
        loop = asyncio.get_running_loop()
        if self._semaphore is None or (self._loop is not loop and self.in_flight == 0):
            self._semaphore = asyncio.Semaphore(self.size)
            self._loop = loop
        return self._semaphore

    async def __aenter__(self) -> ConcurrencyLimiter:
        await self._sem().acquire()
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        self.logger.debug("%s: acquired (%d/%d)", self.name, self.in_flight, self.size)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.in_flight -= 1
        self._sem().release()
