# === FILE: seo_scout/scanner.py ===
"""
Модуль-обёртка для запуска обхода: локально или через удалённый сервер.
"""
from typing import AsyncIterator, Callable, List, Optional

from seo_scout.client import stream_analysis
from seo_scout.config import CrawlerConfig
from seo_scout.crawler.crawler import SeoCrawler
from seo_scout.crawler.models import PageRecord
from seo_scout.events import Event, ResultEvent


async def iter_scan(
    cfg: CrawlerConfig, domain: str, server_url: Optional[str] = None
) -> AsyncIterator[Event]:
    """Events of one crawl, in order; *server_url* switches to a running endpoint."""
    if server_url:
        async for event in stream_analysis(server_url, domain):
            yield event
        return
    async with SeoCrawler(cfg) as crawler:
        async for event in crawler.stream(domain):
            yield event


async def start_scan(
    cfg: CrawlerConfig,
    domain: str,
    server_url: Optional[str] = None,
    on_event: Optional[Callable[[Event], None]] = None,
) -> List[PageRecord]:
    """
    Запускает обход и возвращает список PageRecord.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.
    domain : str
        Хост или абсолютный URL стартовой страницы.
    server_url : str, optional
        Адрес запущенного ``seo-scout serve``; без него обход идёт в этом процессе.
    on_event : callable, optional
        Вызывается для каждого события сразу по его получении.
    """
    records: List[PageRecord] = []
    async for event in iter_scan(cfg, domain, server_url):
        if on_event is not None:
            on_event(event)
        if isinstance(event, ResultEvent):
            records.append(event.value)
    return records

__all__ = ["start_scan", "iter_scan"]
