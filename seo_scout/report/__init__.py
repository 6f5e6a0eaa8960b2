"""seo_scout.report: представления готового списка PageRecord (поиск, JSON, CSV, HTML)."""

from __future__ import annotations

from typing import Iterable, List

from seo_scout.crawler.models import PageRecord
from seo_scout.report.csv_report import render_csv
from seo_scout.report.html_report import render_html
from seo_scout.report.json_report import render_json


def filter_records(records: Iterable[PageRecord], term: str | None) -> List[PageRecord]:
    """Оставляет записи, у которых url, title или meta description содержат term (без учёта регистра)."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(records)
    return [
        r
        for r in records
        if needle in r.url.lower() or needle in r.title.lower() or needle in r.meta_description.lower()
    ]


__all__ = ["filter_records", "render_json", "render_csv", "render_html"]
