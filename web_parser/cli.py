# === FILE: web_parser/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска WebParser через командную строку.

Команды:
  crawl URL...   Обойти сайты и вывести/сохранить сводки (или отправить на вебхук)
  serve          Запустить HTTP-сервер (/parser/siteSummary)
  config         Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --webhook URL       Отправлять каждый результат на вебхук
  --max-links INT     Лимит результатов на seed (0 – без лимита)
  --raw               Сохранять сырой HTML вместо очищенного текста
  --delay SEC         Пауза перед каждой отправкой на вебхук
  --json PATH         Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию WebParser

Пример:
  web_parser crawl https://example.com --max-links 50 --json report.json --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from web_parser import __version__
from web_parser.config import CrawlConfig, load_settings
from web_parser.engine import Engine, start_crawl
from web_parser.logger import DEFAULT_FORMAT, init_logging
from web_parser.report.json_report import render_json
from web_parser.web import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='WebParser, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
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
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд WebParser CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        settings = load_settings(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('urls', nargs=-1, required=True)
@click.option('--webhook', '-w', 'webhook_url', default=None, help='URL вебхука для отправки результатов')
@click.option('--max-links', '-m', 'max_links', type=click.IntRange(min=0), default=0, show_default=True,
              help='Лимит результатов на seed (0 – без лимита)')
@click.option('--raw', is_flag=True, help='Сырой HTML вместо очищенного текста')
@click.option('--delay', '-d', 'delay', type=click.IntRange(min=0), default=0, show_default=True,
              help='Пауза перед каждой отправкой на вебхук (секунд)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Таймаут всего обхода (секунд)')
@click.pass_context
def crawl(ctx, urls, webhook_url, max_links, raw, delay, json_output, pretty, crawl_timeout):
    """Обойти сайты начиная с URLS."""
    settings = ctx.obj['settings']
    try:
        config = CrawlConfig(
            webhook_url=webhook_url,
            max_links_per_seed=max_links,
            clean_text=not raw,
            dispatch_delay_seconds=delay,
        )
    except ValidationError as e:
        print_error(f'Неправильные параметры обхода: {e}')

    try:
        if crawl_timeout:
            result = asyncio.run(
                asyncio.wait_for(start_crawl(settings, urls, config), timeout=crawl_timeout)
            )
        else:
            result = asyncio.run(start_crawl(settings, urls, config))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    # Режим вебхука: только подтверждение
    if isinstance(result, str):
        click.echo(result)
        return

    if json_output:
        try:
            saved_json = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return

    indent = 2 if pretty else None
    click.echo(json.dumps([s.to_dict() for s in result], ensure_ascii=False, indent=indent))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес (по умолчанию из конфига)')
@click.option('--port', type=int, default=None, help='Порт (по умолчанию из конфига)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP-сервер."""
    settings = ctx.obj['settings']
    run_server(Engine(settings), host or settings.host, port or settings.port)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    settings = ctx.obj['settings']
    click.echo(settings.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
