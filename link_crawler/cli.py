# === FILE: link_crawler/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска LinkCrawler через командную строку.

Обходит все страницы хоста, достижимые из URL, и печатает в лог каждую
страницу с её ссылками (сортировка по странице, затем по ссылке).

Опции:
  --config PATH       YAML/JSON файл с настройками обхода
  --concurrency INT   Макс. число одновременных загрузок (default: 20)
  --deadline SEC      Общий лимит времени обхода (секунд)
  --user-agent UA     Заголовок User-Agent
  --json PATH         Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON (отступ 2)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию LinkCrawler

Пример:
  link-crawler https://example.com --concurrency 10 --json links.json --pretty
"""
import sys
from pathlib import Path

import click

from link_crawler import __version__
from link_crawler.config import load_config
from link_crawler.crawler.crawler import InvalidStartURL
from link_crawler.engine import run_crawl
from link_crawler.logger import DEFAULT_FORMAT, init_logging, logger
from link_crawler.report.json_report import render_json
from link_crawler.report.log_report import render_log

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LinkCrawler, version %(version)s')
@click.argument('url')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--concurrency', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Макс. число одновременных загрузок (override concurrency)'
)
@click.option(
    '--deadline', 'deadline',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Общий лимит времени обхода (секунд)'
)
@click.option(
    '--user-agent', 'user_agent',
    default=None,
    help='Заголовок User-Agent'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
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
def cli(url, config_path, concurrency, deadline, user_agent, json_output, pretty, log_level, log_file, log_format):
    """Обойти все страницы хоста URL и вывести найденные ссылки."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(
            config_path,
            start_url=url,
            concurrency=concurrency,
            deadline=deadline,
            user_agent=user_agent,
        )
    except (ValueError, TypeError, OSError) as e:
        print_error(f'Ошибка конфигурации: {e}')

    try:
        links = run_crawl(cfg)
    except InvalidStartURL as e:
        print_error(f'Некорректный URL: {e}')

    render_log(links, logger)

    if json_output:
        try:
            saved_json = render_json(links, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')


if __name__ == "__main__":
    cli()
