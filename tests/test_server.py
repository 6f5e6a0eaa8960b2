import json

import pytest
from aiohttp import ClientResponseError, ClientSession

from seo_scout.client import collect_analysis, stream_analysis
from seo_scout.events import ProgressEvent, ResultEvent
from seo_scout.server import create_app

from .conftest import html_page, serve_app, site_app


@pytest.fixture()
def target_site():
    return site_app(
        {
            "/": html_page('<a href="/about">About</a><img src="x.png" alt="x">', title="Home"),
            "/about": html_page("<h1>About us</h1><p>We crawl sites</p>", title="About"),
        }
    )


@pytest.mark.asyncio()
async def test_endpoint_streams_ndjson(make_config, target_site, unused_tcp_port_factory):
    async with serve_app(target_site, unused_tcp_port_factory()) as site, serve_app(
        create_app(make_config()), unused_tcp_port_factory()
    ) as api:
        async with ClientSession() as session:
            async with session.get(f"{api}/api/analyze", params={"domain": site}) as resp:
                assert resp.status == 200
                assert resp.headers["Content-Type"].startswith("application/x-ndjson")
                body = await resp.text()

    lines = [json.loads(line) for line in body.splitlines()]
    assert [line["type"] for line in lines] == ["progress", "result", "progress", "result", "progress"]
    assert lines[-1] == {"type": "progress", "value": 100}
    home = lines[1]["value"]
    assert home["url"] == f"{site}/"
    assert home["statusCode"] == 200
    assert home["title"] == "Home"
    assert home["imgWithAlt"] == 1
    assert lines[3]["value"]["h1"] == "About us"


@pytest.mark.asyncio()
async def test_client_consumes_stream(make_config, target_site, unused_tcp_port_factory):
    async with serve_app(target_site, unused_tcp_port_factory()) as site, serve_app(
        create_app(make_config()), unused_tcp_port_factory()
    ) as api:
        events = [event async for event in stream_analysis(api, site)]
        records, progress = await collect_analysis(api, site)

    assert isinstance(events[0], ProgressEvent)
    assert [e.value.url for e in events if isinstance(e, ResultEvent)] == [f"{site}/", f"{site}/about"]
    assert events[-1] == ProgressEvent(100)
    assert [r.title for r in records] == ["Home", "About"]
    assert progress == 100


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "params,message",
    [
        ({}, "Domain parameter is required"),
        ({"domain": "   "}, "Domain parameter is required"),
        ({"domain": "ftp://example.com"}, "Unsupported scheme"),
    ],
)
async def test_bad_domain_is_rejected_before_streaming(make_config, unused_tcp_port, params, message):
    async with serve_app(create_app(make_config()), unused_tcp_port) as api:
        async with ClientSession() as session:
            async with session.get(f"{api}/api/analyze", params=params) as resp:
                assert resp.status == 400
                data = await resp.json()
    assert message in data["error"]


@pytest.mark.asyncio()
async def test_client_raises_on_rejected_domain(make_config, unused_tcp_port):
    async with serve_app(create_app(make_config()), unused_tcp_port) as api:
        with pytest.raises(ClientResponseError) as info:
            await collect_analysis(api, "ftp://example.com")
    assert info.value.status == 400
