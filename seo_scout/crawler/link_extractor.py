"""
Link discovery for SeoScout: same-host, normalised targets of ``<a href>``.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from seo_scout.crawler.normalizer import normalize_url

logger = logging.getLogger("SeoScout")


def discover_links(html: Union[str, BeautifulSoup], page_url: str, seed_url: str) -> List[str]:
    """
    Collect the canonical same-host URLs linked from *page_url*.

    Ignores mailto:, javascript:, fragment-only and external links. A href
    that cannot be resolved is skipped without affecting the others. The
    result has no duplicates and keeps document order.
    """
    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "html.parser")
    links: Dict[str, None] = {}
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        try:
            url = normalize_url(href_val, page_url, seed_url)
        except ValueError as exc:
            logger.debug("Skipping href %r on %s: %s", href_val, page_url, exc)
            continue
        if url is not None:
            links.setdefault(url)
    return list(links)


__all__ = ["discover_links"]
