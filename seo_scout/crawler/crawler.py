# === FILE: seo_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import AsyncIterator, List, Optional

from aiohttp import ClientSession

from seo_scout.config import CrawlerConfig
from seo_scout.crawler.fetcher import Fetcher
from seo_scout.crawler.link_extractor import discover_links
from seo_scout.crawler.models import CrawlState, CrawlStatus, FetchResult, PageRecord
from seo_scout.crawler.normalizer import host_of, prepare_seed
from seo_scout.events import Event, EventStream, ProgressEvent, ResultEvent, StreamClosedError
from seo_scout.parser.html_parser import build_record, parse_html

__all__ = ("CrawlStatus", "SeoCrawler")


class SeoCrawler:
    """Последовательный краулер одного сайта с потоковой выдачей событий.

    Один экземпляр держит одну ClientSession; состояние каждого обхода
    (CrawlState) создаётся заново в :meth:`prepare`, поэтому несколько обходов
    могут идти параллельно через один и тот же объект.
    """

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self.logger = logging.getLogger("SeoScout")

    async def __aenter__(self) -> SeoCrawler:
        if self.session is None:
            self.session = ClientSession(raise_for_status=False)
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    def prepare(self, seed: str) -> CrawlState:
        """Проверить *seed* и создать новое состояние обхода (статус idle)."""
        return CrawlState.create(prepare_seed(seed), self.config.max_pages)

    async def run(self, seed: str, stream: EventStream) -> List[PageRecord]:
        """Обойти сайт начиная с *seed*, отправляя события в *stream*.

        Невалидный seed даёт InvalidSeedError до первого события.
        """
        return await self.execute(self.prepare(seed), stream)

    async def execute(self, state: CrawlState, stream: EventStream) -> List[PageRecord]:
        """Выполнить подготовленный обход: idle -> running -> done.

        Ошибки отдельных страниц превращаются в записи и обход не прерывают.
        Поток закрывается, а статус становится done при любом завершении.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        state.status = CrawlStatus.RUNNING
        self.logger.info("Старт обхода: %s (бюджет %d)", state.seed_url, state.frontier.budget)
        start = time.monotonic()
        outcome = "прерван"
        try:
            await self._loop(state, Fetcher(self.session, self.config), stream)
            await stream.send(ProgressEvent(100))
            outcome = "завершён"
        except StreamClosedError:
            self.logger.info("Потребитель отключился, обход %s остановлен", state.seed_url)
        except asyncio.CancelledError:
            stream.detach()
            raise
        finally:
            state.status = CrawlStatus.DONE
            await stream.close()
        duration = time.monotonic() - start
        self.logger.info(
            "Обход %s: %d страниц за %.2f с", outcome, len(state.results), duration
        )
        return state.results

    async def _loop(self, state: CrawlState, fetcher: Fetcher, stream: EventStream) -> None:
        frontier = state.frontier
        while not frontier.exhausted:
            if stream.closed:
                raise StreamClosedError("consumer went away")
            url = frontier.pop()
            if not frontier.mark_visited(url):
                continue
            await stream.send(ProgressEvent(frontier.progress()))

            fetch = await fetcher.fetch(url)
            record, links = self._process(fetch, state.seed_url)
            state.results.append(record)
            await stream.send(ResultEvent(record))

            for link in links:
                if not frontier.offer(link) and not frontier.has_capacity:
                    break

            if not frontier.exhausted and self.config.request_delay:
                await asyncio.sleep(self.config.request_delay)

    def _process(self, fetch: FetchResult, seed_url: str) -> tuple[PageRecord, list[str]]:
        """Build the record and collect same-host links of a fetched page."""
        if not (fetch.ok and fetch.is_html and fetch.body is not None):
            return build_record(fetch), []
        try:
            soup = parse_html(fetch.body)
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("Не удалось разобрать %s: %s", fetch.url, exc)
            return PageRecord(url=fetch.url, status_code=fetch.status_code), []
        record = build_record(fetch, soup)
        links = discover_links(soup, fetch.url, seed_url)
        self.logger.debug("%s -> %d ссылок на %s", fetch.url, len(links), host_of(seed_url))
        return record, links

    async def stream(self, seed: str) -> AsyncIterator[Event]:
        """Run a crawl in the background and yield its events in order.

        The seed is validated before anything is yielded. Leaving the
        iteration early cancels the crawl.
        """
        prepare_seed(seed)
        events = EventStream(self.config.event_buffer)
        task = asyncio.create_task(self.run(seed, events))
        try:
            async for event in events:
                yield event
            await task
        finally:
            if not task.done():
                events.detach()
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError, StreamClosedError):
                    await task

    async def crawl(self, seed: str) -> List[PageRecord]:
        """Run a crawl to completion and return its records."""
        return [event.value async for event in self.stream(seed) if isinstance(event, ResultEvent)]
