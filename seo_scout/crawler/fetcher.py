"""
Fetcher module: one GET per call, identifying User-Agent, explicit timeout.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from seo_scout.config import CrawlerConfig
from seo_scout.crawler.models import FetchResult

logger = logging.getLogger("SeoScout")


class Fetcher:
    """Retrieves single URLs and classifies the response.

    Transport problems never escape: they come back as ``status_code == 0``.
    There are no retries, a failed URL is reported once.
    """

    def __init__(self, session: ClientSession, config: CrawlerConfig) -> None:
        self.session = session
        self.config = config
        self._timeout = ClientTimeout(total=config.timeout)

    async def fetch(self, url: str) -> FetchResult:
        """
        GET *url* and return its status and content type.

        The body is read only for 2xx responses whose content type is HTML.
        """
        try:
            async with self.session.get(
                url,
                headers={"User-Agent": self.config.user_agent},
                timeout=self._timeout,
                allow_redirects=True,
            ) as resp:
                ctype = resp.headers.get("Content-Type", "")
                result = FetchResult(url=url, status_code=resp.status, content_type=ctype)
                if result.ok and result.is_html:
                    result.body = await resp.text(errors="replace")
                return result
        except asyncio.TimeoutError:
            logger.warning("Timeout after %.1f s: %s", self.config.timeout, url)
        except (ClientError, ValueError) as exc:
            # aiohttp.InvalidURL is both a ClientError and a ValueError
            logger.warning("Failed %s: %s", url, exc)
        return FetchResult(url=url, status_code=0)


async def fetch_once(url: str, config: Optional[CrawlerConfig] = None) -> FetchResult:
    """Convenience wrapper that opens a throwaway session for a single request."""
    cfg = config or CrawlerConfig()
    async with ClientSession() as session:
        return await Fetcher(session, cfg).fetch(url)
