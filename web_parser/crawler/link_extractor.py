# web_parser/crawler/link_extractor.py
"""
Link extraction for WebParser.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Set
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__ = ("extract_links", "is_excluded")

log = logging.getLogger("WebParser")

_SKIP_PREFIXES = ("mailto:", "javascript:", "tel:", "data:", "#")


def is_excluded(url: str, excluded: Iterable[str]) -> bool:
    """True if *url* contains any of the excluded substrings (case-insensitive)."""
    lowered = url.lower()
    return any(sub.lower() in lowered for sub in excluded if sub)


def _clean(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, "")).rstrip("/")


def _resolve(base_url: str, raw: str) -> Optional[str]:
    """Absolute http(s) form of *raw* without fragment, or None if unusable."""
    try:
        absolute = urljoin(base_url, raw)
        if urlsplit(absolute).scheme not in ("http", "https"):
            return None
        return _clean(absolute) or None
    except ValueError:
        log.debug("Skipping malformed link %r on %s", raw, base_url)
        return None


def extract_links(content: str, base_url: str, excluded: Iterable[str] = ()) -> Set[str]:
    """
    Absolute http(s) URLs referenced from *content* via ``href`` or ``src``.

    Relative references are resolved against *base_url*; fragments and
    trailing slashes are dropped; anything matching *excluded* is discarded.
    A malformed reference is skipped on its own, the rest of the page still
    counts. Broken markup never raises: the worst case is an empty set.
    """
    excluded = tuple(excluded)
    try:
        soup = BeautifulSoup(content, "html.parser")
        tags = soup.find_all(True)
    except Exception as exc:  # html.parser may choke on pathological input
        log.warning("Link extraction failed for %s: %s", base_url, exc)
        return set()

    links: Set[str] = set()
    for tag in tags:
        if not isinstance(tag, Tag):
            continue
        raw = tag.get("href") if tag.name == "a" else None
        if raw is None:
            raw = tag.get("src")
        if not isinstance(raw, str):
            continue
        raw = raw.strip()
        if not raw or raw.lower().startswith(_SKIP_PREFIXES):
            continue
        cleaned = _resolve(base_url, raw)
        if cleaned and not is_excluded(cleaned, excluded):
            links.add(cleaned)
    return links
