# web_parser/crawler/sinks.py
"""
Where page results go: an in-memory aggregate or a webhook.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from aiohttp import ClientError, ClientSession

from web_parser.crawler.models import CrawlSummary, PageResult
from web_parser.crawler.registry import SentLinkRegistry

__all__ = ("ResultSink", "Aggregator", "WebhookDispatcher")


class ResultSink(ABC):
    """Receives every :class:`PageResult` produced by a traversal."""

    @abstractmethod
    async def emit(self, summary: CrawlSummary, result: PageResult) -> None:
        """Take ownership of *result*; *summary* is the seed it belongs to."""


class Aggregator(ResultSink):
    """Appends results to the owning seed's summary."""

    async def emit(self, summary: CrawlSummary, result: PageResult) -> None:
        # list.append does not yield to the loop, concurrent branches are safe
        summary.results.append(result)


class WebhookDispatcher(ResultSink):
    """POSTs each result to a webhook once.

    A URL already present in the :class:`SentLinkRegistry` is dropped
    silently. The pacing delay is slept before every delivery on its own,
    so concurrent deliveries do not queue behind each other. Delivery
    failures are logged and swallowed.
    """

    def __init__(
        self,
        session: ClientSession,
        webhook_url: str,
        registry: SentLinkRegistry,
        delay_seconds: float = 0,
    ) -> None:
        self.session = session
        self.webhook_url = webhook_url
        self.registry = registry
        self.delay_seconds = delay_seconds
        self.delivered = 0
        self.logger = logging.getLogger("WebParser")

    async def emit(self, summary: CrawlSummary, result: PageResult) -> None:
        if not self.registry.try_admit(result.url):
            self.logger.debug("Already delivered, skipping %s", result.url)
            return
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        await self._post(result)

    async def _post(self, result: PageResult) -> None:
        try:
            async with self.session.post(self.webhook_url, json=result.to_dict()) as resp:
                if 200 <= resp.status < 300:
                    self.delivered += 1
                    self.logger.info("Delivered %s to webhook %s", result.url, self.webhook_url)
                else:
                    self.logger.warning(
                        "Webhook %s rejected %s: %s %s",
                        self.webhook_url, result.url, resp.status, resp.reason,
                    )
        except (ClientError, asyncio.TimeoutError) as exc:
            self.logger.error("Webhook delivery to %s failed for %s: %s", self.webhook_url, result.url, exc)
