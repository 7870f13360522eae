#!/usr/bin/env python3
"""
Точка входа для запуска зеркалирования SiteMirror через командную строку.

Команды:
  mirror    Скачать сайт, начиная с seed URL, в локальную папку
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда mirror опции:
  --url URL           Стартовый URL (обязателен, если не задан в конфиге)
  --output DIR        Корневая папка зеркала (создаётся при отсутствии)
  --depth INT         Глубина рекурсии (0 = без ограничений)
  --concurrency INT   Максимум одновременных рекурсивных загрузок
  --timeout SEC       Таймаут на один запрос
  --crawl-timeout SEC Таймаут всего зеркалирования

Пример:
  site-mirror mirror --url https://example.com --output mirror --depth 2
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_mirror import __version__
from site_mirror.config import build_config
from site_mirror.engine import start_mirror
from site_mirror.logger import DEFAULT_FORMAT, init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMirror, version %(version)s')
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
    """Группа команд SiteMirror CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


def _load(ctx, overrides=None):
    try:
        return build_config(ctx.obj['config_path'], overrides)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@cli.command('mirror', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'seed_url', default=None, help='Стартовый URL сайта')
@click.option(
    '--output', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Корневая папка зеркала'
)
@click.option(
    '--depth', '-d', 'max_depth',
    type=click.IntRange(min=0),
    default=None,
    help='Глубина рекурсии (0 = без ограничений)'
)
@click.option(
    '--concurrency', '-n', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Максимум одновременных рекурсивных загрузок'
)
@click.option('--timeout', 'timeout', type=float, default=None, help='Таймаут на один запрос (секунд)')
@click.option('--user-agent', 'user_agent', default=None, help='Заголовок User-Agent')
@click.option(
    '--lenient-content-type', is_flag=True,
    help='Считать HTML любой ответ с типом text/html, независимо от charset'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего зеркалирования (секунд)'
)
@click.pass_context
def mirror(ctx, seed_url, output_dir, max_depth, concurrency, timeout, user_agent,
           lenient_content_type, crawl_timeout):
    """Скачать сайт рекурсивно в локальную папку."""
    cfg = _load(ctx, {
        'seed_url': seed_url,
        'output_dir': output_dir,
        'max_depth': max_depth,
        'concurrency': concurrency,
        'timeout': timeout,
        'user_agent': user_agent,
        'strict_content_type': False if lenient_content_type else None,
    })
    click.echo(f'Mirroring {cfg.seed_url} into {cfg.output_dir}')
    try:
        if crawl_timeout:
            stats = asyncio.run(
                asyncio.wait_for(start_mirror(cfg), timeout=crawl_timeout)
            )
        else:
            stats = asyncio.run(start_mirror(cfg))
    except asyncio.TimeoutError:
        print_error(f'Зеркалирование не завершено за {crawl_timeout} секунд')
    except OSError as e:
        print_error(f'Не удалось подготовить папку зеркала: {e}')
    except Exception as e:
        print_error(f'Ошибка зеркалирования: {e}')
    click.echo(
        f'Done: {stats.stored} stored, {stats.failed} failed, '
        f'{stats.skipped} already seen, {stats.dropped} beyond depth'
    )


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'seed_url', default=None, help='Стартовый URL сайта')
@click.pass_context
def show_config(ctx, seed_url):
    """Показать итоговую конфигурацию в JSON."""
    cfg = _load(ctx, {'seed_url': seed_url})
    click.echo(json.dumps(cfg.model_dump(mode='json'), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    cli()
