"""seo_scout.client: consumer of the ``/api/analyze`` NDJSON stream."""
from __future__ import annotations

from typing import AsyncIterator, List, Optional, Tuple

from aiohttp import ClientResponseError, ClientSession, ClientTimeout

from seo_scout.crawler.models import PageRecord
from seo_scout.events import Event, ProgressEvent, ResultEvent, decode_event, iter_events
from seo_scout.logger import logger

__all__ = ["stream_analysis", "collect_analysis"]


async def stream_analysis(
    server_url: str,
    domain: str,
    session: Optional[ClientSession] = None,
) -> AsyncIterator[Event]:
    """Start a crawl on a running server and yield its events as they arrive.

    Events are reassembled line by line, independent of how the transport
    splits the body. Lines that do not decode to an event are logged and
    skipped. A non-200 answer raises :class:`aiohttp.ClientResponseError`.
    """
    own_session = session is None
    # no total timeout: a crawl may legitimately run for minutes
    sess = session or ClientSession(timeout=ClientTimeout(total=None))
    try:
        url = server_url.rstrip("/") + "/api/analyze"
        async with sess.get(url, params={"domain": domain}) as resp:
            if resp.status != 200:
                body = await resp.text()
                raise ClientResponseError(
                    resp.request_info, resp.history, status=resp.status, message=body
                )
            async for obj in iter_events(resp.content.iter_any()):
                try:
                    yield decode_event(obj)
                except ValueError as exc:
                    logger.warning("Ignoring event: %s", exc)
    finally:
        if own_session:
            await sess.close()


async def collect_analysis(
    server_url: str, domain: str, session: Optional[ClientSession] = None
) -> Tuple[List[PageRecord], int]:
    """Drain :func:`stream_analysis`; return the records and the last progress value."""
    records: List[PageRecord] = []
    progress = 0
    async for event in stream_analysis(server_url, domain, session):
        if isinstance(event, ResultEvent):
            records.append(event.value)
        elif isinstance(event, ProgressEvent):
            progress = event.value
    return records, progress
