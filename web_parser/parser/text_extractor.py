# === FILE: web_parser/parser/text_extractor.py ===
"""Readable-text extraction for WebParser.

The crawler stores one text payload per visited page. In *clean* mode that
payload is what a human would read on the page:

* ``<script>``, ``<style>``, ``<noscript>`` and ``<template>`` are removed;
* anchors are replaced by their own text;
* HTML entities are decoded, ``&nbsp;`` ends up as an ordinary space;
* blank-line runs collapse to one paragraph break, other whitespace to one
  space, control characters are dropped.

In *raw* mode the fetched body is kept untouched.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from bs4 import BeautifulSoup

from web_parser.crawler.models import NO_INFORMATION

__all__: Sequence[str] = ("extract_clean_text", "extract_payload")

log = logging.getLogger("WebParser")

_PARAGRAPHS_RE = re.compile(r"\n[^\S\n]*(?:\n[^\S\n]*)+")
_SPACES_RE = re.compile(r"[^\S\n]+")
_CONTROL_RE = re.compile(r"[\x00-\x09\x0b-\x1f\x7f-\x9f]")
_STRIP_TAGS = ("script", "style", "noscript", "template")


def extract_clean_text(html: str) -> str:
    """Return normalized human-readable text of *html* (``""`` on failure)."""
    if not html or not html.strip():
        log.warning("Text extraction: empty HTML input")
        return ""

    try:
        soup = BeautifulSoup(html, "html.parser")
        for element in soup(list(_STRIP_TAGS)):
            element.decompose()
        for anchor in soup.find_all("a"):
            anchor.replace_with(anchor.get_text())
        text = soup.get_text()
    except Exception as exc:  # best effort, never propagate parser errors
        log.warning("Text extraction failed: %s", exc)
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _SPACES_RE.sub(" ", text)
    text = _PARAGRAPHS_RE.sub("\n\n", text)
    text = _CONTROL_RE.sub("", text)
    text = "\n".join(line.strip() for line in text.split("\n")).strip()

    log.debug("Extracted clean text, %d characters", len(text))
    return text


def extract_payload(content: str, clean: bool) -> str:
    """Payload stored for a fetched page: clean or raw, never blank."""
    payload = extract_clean_text(content) if clean else content
    return payload if payload and payload.strip() else NO_INFORMATION
