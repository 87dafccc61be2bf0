# === FILE: web_parser/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit, urlunsplit

from web_parser.config import CrawlConfig
from web_parser.crawler.domain import DomainMatcher
from web_parser.crawler.fetcher import Fetcher
from web_parser.crawler.limiter import ConcurrencyLimiter
from web_parser.crawler.link_extractor import extract_links
from web_parser.crawler.models import (
    EXTERNAL_RESOURCE,
    INVALID_URL,
    CrawlSummary,
    FetchOutcome,
    PageResult,
)
from web_parser.crawler.registry import VisitedRegistry, normalize_url
from web_parser.crawler.sinks import ResultSink
from web_parser.parser.text_extractor import extract_payload

__all__ = ("CrawlEngine", "is_absolute_url")


def is_absolute_url(url: str) -> bool:
    """http(s) URL with a host."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.hostname)


def _without_fragment(url: str) -> str:
    parts = urlsplit(url.strip())
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", parts.query, ""))


@dataclass(slots=True)
class _SeedRun:
    """Mutable state of one seed's traversal."""

    summary: CrawlSummary
    seed_domain: str
    emitted: int = 0


class CrawlEngine:
    """Recursive fetch-extract-expand traversal over one or more seeds.

    Every URL goes through the same checks, in order: invalid, already
    visited, link cap reached, out of scope, fetch. A page's own result is
    emitted before its children are scheduled; the children then run
    concurrently and a seed finishes only when its whole subtree has.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        matcher: DomainMatcher,
        seed_limiter: ConcurrencyLimiter,
        excluded: Iterable[str] = (),
    ) -> None:
        self.fetcher = fetcher
        self.matcher = matcher
        self.seed_limiter = seed_limiter
        self.excluded: Tuple[str, ...] = tuple(excluded)
        self.logger = logging.getLogger("WebParser")

    async def run(self, seeds: Sequence[str], config: CrawlConfig, sink: ResultSink) -> List[CrawlSummary]:
        """Crawl all *seeds*; one summary per seed, in submission order."""
        start = time.monotonic()
        visited = VisitedRegistry()
        summaries = [CrawlSummary(seed_url=seed) for seed in seeds]
        outcomes = await asyncio.gather(
            *(self._crawl_seed(summary, visited, config, sink) for summary in summaries),
            return_exceptions=True,
        )
        for summary, outcome in zip(summaries, outcomes):
            if isinstance(outcome, BaseException):
                self.logger.error("Traversal of %s aborted: %r", summary.seed_url, outcome)
        duration = time.monotonic() - start
        self.logger.info(
            "Crawled %d seed(s), %d URL(s) admitted in %.2f s", len(summaries), len(visited), duration
        )
        return summaries

    async def _crawl_seed(
        self, summary: CrawlSummary, visited: VisitedRegistry, config: CrawlConfig, sink: ResultSink
    ) -> None:
        async with self.seed_limiter:
            run = _SeedRun(summary=summary, seed_domain=self.matcher.domain_of(summary.seed_url))
            self.logger.info("Seed %s started (domain %r)", summary.seed_url, run.seed_domain)
            await self._visit(summary.seed_url, run, visited, config, sink)
            self.logger.info("Seed %s finished: %d result(s)", summary.seed_url, run.emitted)

    async def _emit(self, run: _SeedRun, sink: ResultSink, result: PageResult) -> None:
        run.emitted += 1
        await sink.emit(run.summary, result)

    async def _visit(
        self,
        url: str,
        run: _SeedRun,
        visited: VisitedRegistry,
        config: CrawlConfig,
        sink: ResultSink,
    ) -> None:
        if not is_absolute_url(url):
            self.logger.warning("Invalid URL: %s", url)
            await self._emit(run, sink, PageResult(url=url, data=INVALID_URL))
            return

        normalized = normalize_url(url)
        if not visited.try_admit(normalized):
            self.logger.debug("Already visited: %s", normalized)
            return

        # best effort: concurrent siblings may all pass before any of them emits
        limit = config.max_links_per_seed
        if limit and run.emitted >= limit:
            self.logger.debug("Link limit %d reached for %s, skipping %s", limit, run.summary.seed_url, normalized)
            return

        if not self.matcher.url_in_scope(run.seed_domain, normalized):
            self.logger.debug("Out of scope for %r: %s", run.seed_domain, normalized)
            await self._emit(run, sink, PageResult(url=normalized, data=EXTERNAL_RESOURCE))
            return

        target = _without_fragment(url)
        outcome: Optional[FetchOutcome] = None
        try:
            outcome = await self.fetcher.fetch(target)
            if outcome.ok:
                payload = extract_payload(outcome.content, config.clean_text)
            else:
                payload = outcome.error_payload()
        except Exception as exc:
            self.logger.exception("Error processing %s: %s", normalized, exc)
            outcome, payload = None, f"Error: {exc}"

        await self._emit(run, sink, PageResult(url=normalized, data=payload))
        if outcome is None or not outcome.ok:
            return

        links = extract_links(outcome.content, target, self.excluded)
        if not links:
            self.logger.info("No links on %s, branch finished", normalized)
            return

        children = sorted(links)
        branches = await asyncio.gather(
            *(self._visit(link, run, visited, config, sink) for link in children),
            return_exceptions=True,
        )
        for link, res in zip(children, branches):
            if isinstance(res, BaseException):
                self.logger.error("Branch %s aborted: %r", link, res)
