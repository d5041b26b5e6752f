# === FILE: site_shot/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteShot через командную строку.

Команды:
  run       Найти все URL сайта и снять полностраничные скриншоты
  discover  Только найти URL (sitemap или обход ссылок) и вывести их
  status    Показать, сколько найденных URL уже снято (без съёмки)
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязателен)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Коды выхода:
  0  все URL сняты или уже были сняты
  1  фатальная ошибка (конфиг, папка, браузер, таймаут задачи)
  3  задача завершена, но часть URL не удалось снять

Пример:
  site-shot run https://example.com --concurrency 3 --json report.json --gallery index.html
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_shot import __version__
from site_shot.config import build_config
from site_shot.engine import discover, run_job
from site_shot.logger import DEFAULT_FORMAT, init_logging
from site_shot.report.html_report import render_html
from site_shot.report.json_report import render_json
from site_shot.resume import ResumeStore
from site_shot.utils import safe_key

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

EXIT_FATAL = 1
EXIT_PARTIAL = 3


def print_error(message: str, code: int = EXIT_FATAL):
    click.secho(message, fg='red', err=True)
    sys.exit(code)


def _config(ctx, root_url, **overrides):
    """Собирает ShotConfig из файла группы и опций команды, выходит с кодом 1 при ошибке."""
    try:
        return build_config(ctx.obj.get('config_path'), base_url=root_url, **overrides)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


root_argument = click.argument('root_url', required=False)
out_option = click.option(
    '--out', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Папка для скриншотов (по умолчанию screens/<дата>)'
)
log_option = click.option(
    '--log', 'log_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Журнал завершённых URL (по умолчанию <out>/completed.log)'
)
depth_option = click.option('--depth', 'max_depth', type=int, default=None, help='Макс. глубина обхода ссылок')
pages_option = click.option('--pages', 'max_pages', type=int, default=None, help='Макс. число страниц при обходе')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteShot, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
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
    type=click.Path(dir_okay=False, path_type=Path),
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
    """Группа команд SiteShot CLI."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('run', context_settings=CONTEXT_SETTINGS)
@root_argument
@out_option
@log_option
@depth_option
@pages_option
@click.option('--concurrency', type=int, default=None, help='Число вкладок браузера')
@click.option('--delay', type=float, default=None, help='Пауза после каждого URL (секунд)')
@click.option('--retries', 'retry_limit', type=int, default=None, help='Повторы снятия скриншота')
@click.option('--nav-timeout', 'nav_timeout', type=float, default=None, help='Таймаут навигации (секунд)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--gallery', '-g', 'gallery_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Сохранить HTML-галерею скриншотов'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с шаблоном gallery.html.j2'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--job-timeout', 'job_timeout', type=float, default=None, help='Таймаут всей задачи (секунд)')
@click.pass_context
def run(ctx, root_url, output_dir, log_path, max_depth, max_pages, concurrency, delay, retry_limit,
        nav_timeout, json_output, gallery_output, template_dir, pretty, job_timeout):
    """Найти URL и снять скриншоты, продолжая с места прошлого запуска."""
    cfg = _config(
        ctx, root_url,
        output_dir=output_dir, log_path=log_path, max_depth=max_depth, max_pages=max_pages,
        concurrency=concurrency, delay=delay, retry_limit=retry_limit, nav_timeout=nav_timeout,
    )
    click.echo(f'Starting job for {cfg.root} -> {cfg.output_dir}')
    try:
        if job_timeout:
            report = asyncio.run(asyncio.wait_for(run_job(cfg), timeout=job_timeout))
        else:
            report = asyncio.run(run_job(cfg))
    except asyncio.TimeoutError:
        print_error(f'Задача не завершена за {job_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка выполнения задачи: {e}')

    if json_output:
        try:
            click.echo(f'JSON report: {render_json(report, json_output, pretty=pretty)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
    elif pretty:
        click.echo(report.json(pretty=True))

    if gallery_output:
        try:
            click.echo(f'HTML gallery: {render_html(report, template_dir, gallery_output)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    click.echo(f'Done: {report.summary()}; screenshots in {cfg.output_dir}')
    if not report.ok:
        sys.exit(EXIT_PARTIAL)


@cli.command('discover', context_settings=CONTEXT_SETTINGS)
@root_argument
@depth_option
@pages_option
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Сохранить список URL в JSON-файл'
)
@click.pass_context
def discover_cmd(ctx, root_url, max_depth, max_pages, json_output):
    """Найти URL сайта без съёмки."""
    cfg = _config(ctx, root_url, max_depth=max_depth, max_pages=max_pages)
    try:
        found = asyncio.run(discover(cfg))
    except Exception as e:
        print_error(f'Ошибка при поиске URL: {e}')

    if json_output:
        json_output.parent.mkdir(parents=True, exist_ok=True)
        payload = {'root': cfg.root, 'strategy': found.strategy, 'urls': list(found.urls)}
        json_output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding='utf-8')
        click.echo(f'{len(found.urls)} URLs ({found.strategy}) saved to {json_output}')
        return
    for url in found.urls:
        click.echo(url)


@cli.command('status', context_settings=CONTEXT_SETTINGS)
@root_argument
@out_option
@log_option
@depth_option
@pages_option
@click.pass_context
def status(ctx, root_url, output_dir, log_path, max_depth, max_pages):
    """Показать прогресс: сколько найденных URL уже снято."""
    cfg = _config(ctx, root_url, output_dir=output_dir, log_path=log_path, max_depth=max_depth, max_pages=max_pages)
    try:
        found = asyncio.run(discover(cfg))
    except Exception as e:
        print_error(f'Ошибка при поиске URL: {e}')

    done = ResumeStore(cfg.output_dir, cfg.done_log, cfg.image_ext).load_done()
    finished = sum(1 for url in found.urls if safe_key(url, cfg.safe_key_length, cfg.hashed_keys) in done)
    click.echo(f'{finished}/{len(found.urls)} done ({found.strategy}), {len(found.urls) - finished} pending in {cfg.output_dir}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@root_argument
@click.pass_context
def show_config(ctx, root_url):
    """Показать текущую конфигурацию в JSON."""
    cfg = _config(ctx, root_url)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
