# File: tests/conftest.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict

import pytest
from aiohttp import web

from seo_scout.config import CrawlerConfig
from seo_scout.crawler.models import PageRecord


@asynccontextmanager
async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


def html_page(body: str, title: str = "") -> str:
    head = f"<title>{title}</title>" if title else ""
    return f"<html><head>{head}</head><body>{body}</body></html>"


def site_app(pages: Dict[str, str], hits: Dict[str, int] | None = None) -> web.Application:
    """Application serving each path of *pages* as text/html, counting requests."""
    app = web.Application()

    def make_handler(path: str, text: str):
        async def handler(_):
            if hits is not None:
                hits[path] = hits.get(path, 0) + 1
            return web.Response(text=text, content_type="text/html")

        return handler

    for path, text in pages.items():
        app.router.add_get(path, make_handler(path, text))
    return app


@pytest.fixture()
def make_config() -> Callable[..., CrawlerConfig]:
    """Fast config for tests: no politeness delay, short timeout."""

    def _make(**overrides) -> CrawlerConfig:
        params = dict(max_pages=10, request_delay=0.0, timeout=2.0, user_agent="TestAgent/1.0")
        params.update(overrides)
        return CrawlerConfig(**params)

    return _make


@pytest.fixture()
def sample_records() -> list[PageRecord]:
    return [
        PageRecord(
            url="https://example.com/",
            status_code=200,
            title="Home, sweet \"home\"",
            meta_description="Landing page",
            canonical="https://example.com/",
            h1="Welcome",
            h2_count=2,
            img_count=3,
            img_with_alt=1,
            word_count=120,
        ),
        PageRecord(url="https://example.com/blog", status_code=200, title="Blog", h1="Posts"),
        PageRecord(url="https://example.com/missing", status_code=404),
    ]
