"""HTML parsing utilities for SeoScout.

Turns a fetched document into the on-page SEO signals recorded per URL:

* title: first ``<title>`` text (trimmed) or ``""``.
* meta description: ``content`` of ``<meta name="description">``.
* canonical: ``href`` of ``<link rel="canonical">``.
* h1: first ``<h1>`` text (trimmed).
* counts: ``<h2>``, ``<img>``, ``<img>`` carrying an ``alt`` attribute
  (an empty ``alt=""`` still counts) and whitespace-delimited words of
  ``<body>``.

Each field is extracted independently: if one of them blows up on odd
markup, that field keeps its default and the rest of the record survives.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from typing import Any, TypeVar

from bs4 import BeautifulSoup
from bs4.element import Tag

from seo_scout.crawler.models import FetchResult, PageRecord

__all__: Sequence[str] = ("SeoMetadata", "extract_metadata", "build_record", "parse_html")

logger = logging.getLogger("SeoScout")

_T = TypeVar("_T")


@dataclass(slots=True)
class SeoMetadata:
    """Everything a PageRecord carries besides url and status."""

    title: str = ""
    meta_description: str = ""
    canonical: str = ""
    h1: str = ""
    h2_count: int = 0
    img_count: int = 0
    img_with_alt: int = 0
    word_count: int = 0


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _first_text(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find(name)
    return tag.get_text().strip() if isinstance(tag, Tag) else ""


def _attr(tag: Any, attr: str) -> str:
    if not isinstance(tag, Tag):
        return ""
    value = tag.get(attr)
    if isinstance(value, list):
        return " ".join(value)
    return value or ""


def _meta_description(soup: BeautifulSoup) -> str:
    return _attr(soup.find("meta", attrs={"name": "description"}), "content")


def _canonical(soup: BeautifulSoup) -> str:
    # rel is multi-valued in bs4, so this matches rel="canonical" among others
    return _attr(soup.find("link", rel="canonical"), "href")


def _word_count(soup: BeautifulSoup) -> int:
    body = soup.find("body")
    if not isinstance(body, Tag):
        return 0
    return len(body.get_text().split())


def _safe(name: str, func: Callable[[], _T], default: _T) -> _T:
    try:
        return func()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Extraction of %s failed: %s", name, exc)
        return default


def extract_metadata(html: str | BeautifulSoup) -> SeoMetadata:
    """Extract the SEO fields from raw markup or an already parsed soup."""
    soup = html if isinstance(html, BeautifulSoup) else parse_html(html)
    images = _safe("img", lambda: soup.find_all("img"), [])
    return SeoMetadata(
        title=_safe("title", lambda: _first_text(soup, "title"), ""),
        meta_description=_safe("meta description", lambda: _meta_description(soup), ""),
        canonical=_safe("canonical", lambda: _canonical(soup), ""),
        h1=_safe("h1", lambda: _first_text(soup, "h1"), ""),
        h2_count=_safe("h2", lambda: len(soup.find_all("h2")), 0),
        img_count=len(images),
        img_with_alt=_safe("img alt", lambda: sum(1 for img in images if img.has_attr("alt")), 0),
        word_count=_safe("word count", lambda: _word_count(soup), 0),
    )


def build_record(fetch: FetchResult, soup: BeautifulSoup | None = None) -> PageRecord:
    """Make the PageRecord for *fetch*.

    Metadata is filled only for successful HTML responses; anything else
    carries just the URL and status code.
    """
    if not (fetch.ok and fetch.is_html and fetch.body is not None):
        return PageRecord(url=fetch.url, status_code=fetch.status_code)
    meta = extract_metadata(soup if soup is not None else fetch.body)
    return PageRecord(url=fetch.url, status_code=fetch.status_code, **asdict(meta))
