"""seo_scout.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from seo_scout.crawler.models import PageRecord

#: шаблоны, поставляемые вместе с пакетом
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def render_html(
    records: Iterable[PageRecord],
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        records: записи обхода.
        template_dir: директория с шаблоном ``report.html.j2``;
            None означает встроенный шаблон.
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    pages = list(records)
    context: dict[str, Any] = {
        "pages": pages,
        "total": len(pages),
        "errors": sum(1 for p in pages if not p.ok),
        "missing_title": sum(1 for p in pages if p.ok and not p.title),
        "missing_h1": sum(1 for p in pages if p.ok and not p.h1),
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
