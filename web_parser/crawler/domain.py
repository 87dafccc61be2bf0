# web_parser/crawler/domain.py
"""
Domain scoping for the crawler.
"""
from __future__ import annotations

import re
from typing import Pattern, Union

__all__ = ("DomainMatcher",)


class DomainMatcher:
    """Derives a domain identifier from a URL with one configured regex.

    The pattern is applied to every URL separately. When it has a capturing
    group, group 1 is the identifier; otherwise the whole match is used.
    A URL the pattern does not match has the empty identifier, which is
    always in scope.
    """

    def __init__(self, pattern: Union[str, Pattern[str]]) -> None:
        # re.error here is fatal: settings validation should have caught it
        self._regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, re.IGNORECASE)

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    def domain_of(self, url: str) -> str:
        match = self._regex.search(url)
        if match is None:
            return ""
        value = match.group(1) if self._regex.groups else match.group(0)
        return (value or "").lower()

    @staticmethod
    def in_scope(seed_domain: str, candidate_domain: str) -> bool:
        if not seed_domain or not candidate_domain:
            return True
        return seed_domain == candidate_domain

    def url_in_scope(self, seed_domain: str, url: str) -> bool:
        return self.in_scope(seed_domain, self.domain_of(url))
