# File: tests/test_domain.py
import pytest
from pydantic import ValidationError

from web_parser.config import DEFAULT_DOMAIN_PATTERN, ParserSettings
from web_parser.crawler.domain import DomainMatcher


@pytest.fixture()
def matcher() -> DomainMatcher:
    return DomainMatcher(DEFAULT_DOMAIN_PATTERN)


@pytest.mark.parametrize(
    "url,domain",
    [
        ("https://example.com/", "example.com"),
        ("https://www.Example.com/about", "example.com"),
        ("http://127.0.0.1:8080/x", "127.0.0.1"),
        ("ftp://example.com/", ""),
        ("not a url", ""),
    ],
)
def test_domain_of(matcher, url, domain):
    assert matcher.domain_of(url) == domain


@pytest.mark.parametrize(
    "seed,candidate,expected",
    [
        ("example.com", "example.com", True),
        ("example.com", "other.com", False),
        ("", "other.com", True),
        ("example.com", "", True),
    ],
)
def test_in_scope(seed, candidate, expected):
    assert DomainMatcher.in_scope(seed, candidate) is expected


def test_pattern_without_group_uses_whole_match():
    matcher = DomainMatcher(r"[a-z]+\.com")
    assert matcher.domain_of("https://shop.example.com/") == "example.com"


def test_second_level_pattern_keeps_subdomains_in_scope():
    matcher = DomainMatcher(r"^https?://(?:[^/]+\.)?([^./]+\.[^./:]+)(?::\d+)?(?:/|$)")
    seed = matcher.domain_of("https://example.com/")
    assert matcher.url_in_scope(seed, "https://blog.example.com/post")
    assert not matcher.url_in_scope(seed, "https://example.org/")


def test_invalid_pattern_is_fatal():
    with pytest.raises(ValidationError):
        ParserSettings(domain_name_pattern="([unclosed")
