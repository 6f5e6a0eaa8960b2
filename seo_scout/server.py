"""seo_scout.server: HTTP-эндпоинт, отдающий ход обхода потоком NDJSON.

``GET /api/analyze?domain=example.com`` открывает chunked-ответ
``application/x-ndjson``; каждая строка это одно событие progress/result,
последняя строка всегда ``{"type":"progress","value":100}``.
"""
from __future__ import annotations

from typing import AsyncIterator, Optional

from aiohttp import ClientSession, web

from seo_scout.config import CrawlerConfig
from seo_scout.crawler.crawler import SeoCrawler
from seo_scout.crawler.normalizer import InvalidSeedError, prepare_seed
from seo_scout.events import encode_event
from seo_scout.logger import logger

__all__ = ["create_app", "run_server", "CRAWLER_KEY"]

CRAWLER_KEY = web.AppKey("crawler", SeoCrawler)
NDJSON = "application/x-ndjson"


async def analyze(request: web.Request) -> web.StreamResponse:
    """Обход сайта из параметра ``domain`` с потоковой выдачей событий."""
    domain = request.query.get("domain", "").strip()
    if not domain:
        return web.json_response({"error": "Domain parameter is required"}, status=400)
    try:
        seed = prepare_seed(domain)
    except InvalidSeedError as exc:
        return web.json_response({"error": str(exc)}, status=400)

    crawler = request.app[CRAWLER_KEY]
    response = web.StreamResponse(headers={"Content-Type": NDJSON, "Cache-Control": "no-cache"})
    response.enable_chunked_encoding()
    await response.prepare(request)

    logger.info("Запрос обхода %s от %s", seed, request.remote)
    events = crawler.stream(seed)
    try:
        async for event in events:
            await response.write(encode_event(event))
    except ConnectionError:
        logger.info("Клиент отключился, обход %s отменён", seed)
        return response
    finally:
        await events.aclose()
    await response.write_eof()
    return response


def create_app(config: Optional[CrawlerConfig] = None) -> web.Application:
    """Собирает aiohttp-приложение; одна ClientSession на всё приложение."""
    cfg = config or CrawlerConfig()
    app = web.Application()

    async def _crawler_ctx(app: web.Application) -> AsyncIterator[None]:
        async with ClientSession(raise_for_status=False) as session:
            app[CRAWLER_KEY] = SeoCrawler(cfg, session=session)
            yield

    app.cleanup_ctx.append(_crawler_ctx)
    app.router.add_get("/api/analyze", analyze)
    return app


def run_server(config: CrawlerConfig, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Блокирующий запуск сервера (используется командой ``serve``)."""
    web.run_app(
        create_app(config),
        host=host or config.server.host,
        port=port if port is not None else config.server.port,
        print=None,
    )
