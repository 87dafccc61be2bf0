# File: web_parser/engine.py
"""web_parser.engine: Orchestration layer – один запрос на обход от seed-URL до ответа."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, Union

from aiohttp import ClientSession, ClientTimeout

from web_parser.config import CrawlConfig, ParserSettings, load_settings
from web_parser.crawler.crawler import CrawlEngine
from web_parser.crawler.domain import DomainMatcher
from web_parser.crawler.fetcher import Fetcher
from web_parser.crawler.limiter import ConcurrencyLimiter
from web_parser.crawler.models import CrawlSummary
from web_parser.crawler.registry import SentLinkRegistry
from web_parser.crawler.sinks import Aggregator, ResultSink, WebhookDispatcher
from web_parser.logger import logger

__all__ = ["Engine", "WEBHOOK_ACK", "start_crawl"]

WEBHOOK_ACK = "Webhook processing initiated. Links will be sent to the provided URL."

CrawlResponse = Union[List[CrawlSummary], str]


class Engine:
    """Фасад для CLI, HTTP-сервера и тестов.

    Держит всё, что живёт дольше одного запроса: матчер домена, оба пула
    разрешений, список исключений и (в режиме ``process``) реестр уже
    отправленных на вебхук ссылок. Всё, что относится к запросу, приходит
    аргументом :class:`CrawlConfig`.
    """

    @staticmethod
    def load_settings(path: Optional[str]) -> ParserSettings:
        """Загружает настройки из YAML/JSON или использует значения по умолчанию."""
        return load_settings(path)

    def __init__(self, settings: ParserSettings) -> None:
        self.settings = settings
        self.matcher = DomainMatcher(settings.domain_name_pattern)
        self.seed_limiter = ConcurrencyLimiter(settings.seed_concurrency, name="seed-limiter")
        self.fetch_limiter = ConcurrencyLimiter(settings.fetch_concurrency, name="fetch-limiter")
        self.excluded = settings.exclusion_list()
        self.sent_registry = SentLinkRegistry(ttl=settings.sent_registry_ttl)

    def _sent_registry_for_request(self) -> SentLinkRegistry:
        if self.settings.sent_registry_scope == "request":
            return SentLinkRegistry()
        return self.sent_registry

    def _session(self) -> ClientSession:
        return ClientSession(
            timeout=ClientTimeout(total=self.settings.timeout),
            headers={"User-Agent": self.settings.user_agent},
            raise_for_status=False,
        )

    async def site_summary(
        self, urls: Sequence[str], config: Optional[CrawlConfig] = None
    ) -> CrawlResponse:
        """Обходит *urls*: список CrawlSummary или подтверждение отправки на вебхук."""
        seeds = [u for u in urls if u and u.strip()]
        if not seeds:
            raise ValueError("at least one seed URL is required")
        config = config or CrawlConfig()

        logger.info("Crawl request for: %s", ", ".join(seeds))
        async with self._session() as session:
            fetcher = Fetcher(session, self.settings, self.fetch_limiter)
            crawler = CrawlEngine(fetcher, self.matcher, self.seed_limiter, self.excluded)
            sink: ResultSink
            if config.dispatch_mode:
                logger.info("Results go to webhook %s", config.webhook_url)
                sink = WebhookDispatcher(
                    session,
                    str(config.webhook_url),
                    self._sent_registry_for_request(),
                    delay_seconds=config.dispatch_delay_seconds,
                )
                await crawler.run(seeds, config, sink)
                logger.info("Crawl request finished (webhook mode)")
                return WEBHOOK_ACK

            summaries = await crawler.run(seeds, config, Aggregator())
        logger.info("Crawl request finished: %d summaries", len(summaries))
        return summaries

    def run(self, urls: Sequence[str], config: Optional[CrawlConfig] = None) -> CrawlResponse:
        """Синхронная обёртка над :meth:`site_summary`."""
        try:
            return asyncio.run(self.site_summary(urls, config))
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise


async def start_crawl(
    settings: ParserSettings, urls: Sequence[str], config: Optional[CrawlConfig] = None
) -> CrawlResponse:
    """Одноразовый Engine на один запрос (точка входа CLI)."""
    return await Engine(settings).site_summary(urls, config)
