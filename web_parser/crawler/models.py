# web_parser/crawler/models.py
"""
Data models for the WebParser crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

#: payload of a link that leaves the seed's domain; never fetched
EXTERNAL_RESOURCE = "external resource"
#: payload of a fetched page without any readable text
NO_INFORMATION = "No information found"
INVALID_URL = "Error: Invalid URL"


@dataclass(frozen=True, slots=True)
class PageResult:
    """One visited URL and its payload (text, sentinel or error message)."""

    url: str
    data: str

    @property
    def word_count(self) -> int:
        return len(self.data.split())

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "wordCount": self.word_count, "data": self.data}


@dataclass(slots=True)
class CrawlSummary:
    """All results collected for one seed URL."""

    seed_url: str
    results: List[PageResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.seed_url, "links": [r.to_dict() for r in self.results]}


@dataclass(slots=True)
class FetchOutcome:
    """Raw result of one GET: either a status (+ body) or a transport error."""

    url: str
    status: Optional[int] = None
    reason: str = ""
    content: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status is not None and 200 <= self.status < 300

    def error_payload(self) -> str:
        if self.error is not None:
            return f"Error: {self.error}"
        return f"Error: {self.status} {self.reason}".rstrip()
