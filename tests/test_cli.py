# File: tests/test_cli.py
"""Тесты для CLI (`seo_scout.cli`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `serve`, `config`, `--version`, а также обработку ошибок.
"""
import csv
import importlib
import json

import pytest
from click.testing import CliRunner

cli_module = importlib.import_module("seo_scout.cli")
from seo_scout.cli import cli
from seo_scout.crawler.models import PageRecord
from seo_scout.crawler.normalizer import InvalidSeedError
from seo_scout.events import ProgressEvent, ResultEvent
from seo_scout.logger import init_logging


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Без configs/default.yaml в рабочем каталоге берутся значения по умолчанию."""
    monkeypatch.chdir(tmp_path)
    yield
    init_logging()


@pytest.fixture()
def fake_scan(monkeypatch):
    """Патчим start_scan: события без сетевых запросов."""
    calls = {}
    records = [
        PageRecord(url="https://example.com/", status_code=200, title="Home", meta_description="Start"),
        PageRecord(url="https://example.com/blog", status_code=200, title="Blog"),
    ]

    async def _scan(cfg, domain, server_url=None, on_event=None):
        calls.update(cfg=cfg, domain=domain, server_url=server_url)
        if domain == "bad":
            raise InvalidSeedError("No host")
        events = [ProgressEvent(50), ResultEvent(records[0]), ProgressEvent(100), ResultEvent(records[1]), ProgressEvent(100)]
        for event in events:
            if on_event:
                on_event(event)
        return records

    monkeypatch.setattr(cli_module, "start_scan", _scan)
    return calls


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SeoScout" in result.output


def test_show_config_with_limit(tmp_path):
    cfg_file = tmp_path / "cfg.json"
    cfg_file.write_text(json.dumps({"max_pages": 20, "user_agent": "Agent/1.0"}), encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "--limit", "5", "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["max_pages"] == 5
    assert data["user_agent"] == "Agent/1.0"


def test_bad_config_exits_with_error(tmp_path):
    cfg_file = tmp_path / "cfg.yaml"
    cfg_file.write_text("max_pages: -1", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1


def test_crawl_prints_ndjson(fake_scan):
    result = CliRunner().invoke(cli, ["--limit", "3", "crawl", "example.com"])
    assert result.exit_code == 0
    lines = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
    assert [line["type"] for line in lines] == ["progress", "result", "progress", "result", "progress"]
    assert lines[1]["value"]["url"] == "https://example.com/"
    assert fake_scan["domain"] == "example.com"
    assert fake_scan["cfg"].max_pages == 3
    assert fake_scan["server_url"] is None


def test_crawl_writes_reports(tmp_path, fake_scan):
    json_out = tmp_path / "r.json"
    csv_out = tmp_path / "r.csv"
    html_out = tmp_path / "r.html"
    result = CliRunner().invoke(
        cli,
        [
            "crawl", "example.com",
            "--server", "http://127.0.0.1:8080",
            "--json", str(json_out),
            "--csv", str(csv_out),
            "--html", str(html_out),
            "--filter", "blog",
        ],
    )
    assert result.exit_code == 0, result.output
    assert fake_scan["server_url"] == "http://127.0.0.1:8080"
    assert [r["url"] for r in json.loads(json_out.read_text(encoding="utf-8"))] == ["https://example.com/blog"]
    with csv_out.open(encoding="utf-8", newline="") as f:
        assert len(list(csv.reader(f))) == 2
    assert "https://example.com/blog" in html_out.read_text(encoding="utf-8")
    assert "JSON report:" in result.output
    assert '"type"' not in result.output


def test_crawl_invalid_domain(fake_scan):
    result = CliRunner().invoke(cli, ["crawl", "bad"])
    assert result.exit_code == 1


def test_serve_uses_config_defaults(monkeypatch):
    seen = {}
    monkeypatch.setattr(cli_module, "run_server", lambda cfg, host=None, port=None: seen.update(host=host, port=port))
    result = CliRunner().invoke(cli, ["serve", "--port", "9999"])
    assert result.exit_code == 0
    assert seen == {"host": None, "port": 9999}
    assert "http://127.0.0.1:9999" in result.output
