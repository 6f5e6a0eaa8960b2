"""
Data models for the SeoScout crawler.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from seo_scout.crawler.frontier import CrawlFrontier

#: PageRecord attribute -> key used in the JSON wire format
WIRE_KEYS: Dict[str, str] = {
    "url": "url",
    "status_code": "statusCode",
    "title": "title",
    "meta_description": "metaDescription",
    "canonical": "canonical",
    "h1": "h1",
    "h2_count": "h2Count",
    "img_count": "imgCount",
    "img_with_alt": "imgWithAlt",
    "word_count": "wordCount",
}


@dataclass(slots=True, frozen=True)
class PageRecord:
    """SEO snapshot of one visited URL. ``status_code == 0`` means no HTTP response."""

    url: str
    status_code: int
    title: str = ""
    meta_description: str = ""
    canonical: str = ""
    h1: str = ""
    h2_count: int = 0
    img_count: int = 0
    img_with_alt: int = 0
    word_count: int = 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def to_dict(self) -> Dict[str, Any]:
        return {wire: getattr(self, attr) for attr, wire in WIRE_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PageRecord:
        """Build a record from its wire form; unknown keys are ignored."""
        kwargs = {attr: data[wire] for attr, wire in WIRE_KEYS.items() if wire in data}
        return cls(**kwargs)


@dataclass(slots=True)
class FetchResult:
    """Outcome of one GET: status, content type and the HTML body when it was read."""

    url: str
    status_code: int
    content_type: str = ""
    body: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()


class CrawlStatus(str, enum.Enum):
    """Lifecycle of one crawl: idle until started, running, then done."""

    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


@dataclass(slots=True)
class CrawlState:
    """Mutable state of a single crawl; created per request, never shared."""

    seed_url: str
    frontier: CrawlFrontier
    results: List[PageRecord] = field(default_factory=list)
    status: CrawlStatus = CrawlStatus.IDLE

    @classmethod
    def create(cls, seed_url: str, budget: int) -> CrawlState:
        return cls(seed_url=seed_url, frontier=CrawlFrontier(seed_url, budget))
