# web_parser/crawler/registry.py
"""
URL registries shared by concurrent traversal branches.

:class:`VisitedRegistry` lives for one top-level request and guarantees that
a URL is fetched at most once across all seeds of that request.
:class:`SentLinkRegistry` remembers URLs already delivered to a webhook; its
lifetime (one request or the whole process) is chosen by the caller.

Both expose a single ``try_admit`` primitive: the membership test and the
insert happen under one lock, so two concurrent callers with the same URL
can never both be admitted.
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional, Set
from urllib.parse import urlsplit, urlunsplit

__all__ = ("normalize_url", "VisitedRegistry", "SentLinkRegistry")


def normalize_url(url: str) -> str:
    """
    Canonical form used for deduplication: lower-case scheme and host,
    fragment dropped, trailing slash dropped. The query string is kept.
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        # unparseable (e.g. a broken IPv6 host): key on the raw text
        return url.strip().rstrip("/")
    path = parts.path.rstrip("/")
    normalized = urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))
    return normalized.rstrip("/")


class VisitedRegistry:
    """Set of normalized URLs already scheduled during one request."""

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def try_admit(self, url: str) -> bool:
        """True exactly once per distinct normalized URL."""
        key = normalize_url(url)
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return normalize_url(url) in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)


class SentLinkRegistry:
    """
    URLs already delivered to a webhook.

    With ``ttl=None`` an admitted URL is suppressed for the registry's whole
    lifetime; otherwise it becomes deliverable again ``ttl`` seconds later.
    """

    def __init__(
        self,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._sent: Dict[str, float] = {}
        self._lock = threading.Lock()

    def try_admit(self, url: str) -> bool:
        key = normalize_url(url)
        now = self._clock()
        with self._lock:
            sent_at = self._sent.get(key)
            if sent_at is not None and (self.ttl is None or now - sent_at < self.ttl):
                return False
            self._sent[key] = now
            return True

    def reset(self) -> None:
        with self._lock:
            self._sent.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sent)
