#!/usr/bin/env python3
"""
Точка входа SeoScout для командной строки.

Команды:
  crawl DOMAIN   Обойти сайт и вывести события NDJSON или сохранить отчёты
  serve          Запустить HTTP-эндпоинт /api/analyze
  config         Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --limit INT         Бюджет страниц (override max_pages)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --server URL        Использовать запущенный `seo-scout serve` вместо локального обхода
  --json PATH         Сохранить JSON-отчёт в файл
  --csv PATH          Сохранить CSV-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном report.html.j2
  --filter TERM       Оставить в отчётах только совпадения по url/title/description
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Пример:
  seo-scout --limit 50 crawl example.com --csv report.csv
"""
import asyncio
import sys
from pathlib import Path

import click

from seo_scout import __version__
from seo_scout.config import load_config
from seo_scout.crawler.normalizer import InvalidSeedError
from seo_scout.events import encode_event
from seo_scout.logger import DEFAULT_FORMAT, init_logging
from seo_scout.report import filter_records, render_csv, render_html, render_json
from seo_scout.scanner import start_scan
from seo_scout.server import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SeoScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Бюджет страниц (override max_pages)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """Группа команд SeoScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    if limit is not None:
        cfg = cfg.model_copy(update={'max_pages': limit})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


def _echo_event(event) -> None:
    click.echo(encode_event(event).decode('utf-8'), nl=False)


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('domain')
@click.option('--server', '-s', 'server_url', default=None, help='URL запущенного сервера SeoScout')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--csv', 'csv_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить CSV-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (встроенный шаблон, если не указана)'
)
@click.option('--filter', '-f', 'term', default=None, help='Фильтр записей для отчётов')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, domain, server_url, json_output, csv_output, html_output, template_dir, term, crawl_timeout):
    """Обойти сайт DOMAIN и вывести/сохранить результаты."""
    cfg = ctx.obj['config']
    to_stdout = not (json_output or csv_output or html_output)
    on_event = _echo_event if to_stdout else None
    try:
        scan = start_scan(cfg, domain, server_url=server_url, on_event=on_event)
        if crawl_timeout:
            records = asyncio.run(asyncio.wait_for(scan, timeout=crawl_timeout))
        else:
            records = asyncio.run(scan)
    except InvalidSeedError as e:
        print_error(f'Некорректный домен: {e}')
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if to_stdout:
        return

    selected = filter_records(records, term)
    outputs = (
        ('JSON', json_output, lambda p: render_json(selected, p)),
        ('CSV', csv_output, lambda p: render_csv(selected, p)),
        ('HTML', html_output, lambda p: render_html(selected, template_dir, p)),
    )
    for label, path, render in outputs:
        if not path:
            continue
        try:
            saved = render(path)
            click.echo(f'{label} report: {saved}')
        except Exception as e:
            print_error(f'Ошибка при сохранении {label}: {e}')


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес (по умолчанию из конфига)')
@click.option('--port', type=click.IntRange(0, 65535), default=None, help='Порт (по умолчанию из конфига)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP-сервер с эндпоинтом /api/analyze."""
    cfg = ctx.obj['config']
    click.echo(f'Serving on http://{host or cfg.server.host}:{port if port is not None else cfg.server.port}')
    run_server(cfg, host=host, port=port)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
