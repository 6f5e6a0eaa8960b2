"""seo_scout.report.csv_report: экспорт результатов в CSV."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Union

from seo_scout.crawler.models import PageRecord

CSV_HEADERS = (
    "URL",
    "Status",
    "Title",
    "Meta Description",
    "Canonical",
    "H1",
    "H2 Count",
    "Image Count",
    "Images with Alt",
    "Word Count",
)


def render_csv(records: Iterable[PageRecord], output_path: Union[Path, str]) -> Path:
    """Пишет одну строку на запись; текстовые поля экранируются модулем csv."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADERS)
        for r in records:
            writer.writerow(
                (
                    r.url,
                    r.status_code,
                    r.title,
                    r.meta_description,
                    r.canonical,
                    r.h1,
                    r.h2_count,
                    r.img_count,
                    r.img_with_alt,
                    r.word_count,
                )
            )
    return output
