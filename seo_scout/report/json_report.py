# seo_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта SeoScout.

Сериализация списка PageRecord в файл, в том же формате, что и поле
``value`` событий ``result``.
"""
import json
from pathlib import Path
from typing import Iterable

from seo_scout.crawler.models import PageRecord


def render_json(records: Iterable[PageRecord], output_path: Path | str) -> Path:
    """
    Сохраняет записи в формате JSON по указанному пути.

    :param records: записи обхода
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from seo_scout.report.json_report import render_json
    report_path = render_json(records, 'reports/report.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = [record.to_dict() for record in records]

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
