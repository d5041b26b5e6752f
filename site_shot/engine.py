# File: site_shot/engine.py
"""site_shot.engine: Оркестрация задачи: обнаружение URL, состояние возобновления, снятие скриншотов."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Union

from site_shot.aggregator import JobReport
from site_shot.capture import BrowserPool
from site_shot.config import ShotConfig, load_config
from site_shot.crawler.fetcher import Fetcher, TextFetcher
from site_shot.discovery import Discovery, discover_urls
from site_shot.dispatcher import DispatchEngine
from site_shot.logger import logger
from site_shot.resume import ResumeStore

__all__ = ["Engine", "discover", "run_job"]


async def discover(config: ShotConfig, fetcher: Optional[TextFetcher] = None) -> Discovery:
    """Обнаружение URL; без переданного fetcher открывает собственную HTTP-сессию."""
    if fetcher is not None:
        return await discover_urls(config, fetcher)
    async with Fetcher(config) as own:
        return await discover_urls(config, own)


async def run_job(
    config: ShotConfig,
    *,
    fetcher: Optional[TextFetcher] = None,
    pool: Optional[BrowserPool] = None,
) -> JobReport:
    """Полный запуск: папка, обнаружение, пропуск готового, раздача по вкладкам, сводка.

    Фатальны только невозможность создать выходную папку (OSError) и запустить
    браузер (CaptureUnavailable); ошибки отдельных URL попадают в отчёт.
    """
    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Cannot create output directory %s: %s", config.output_dir, exc)
        raise

    discovery = await discover(config, fetcher)
    logger.info("Collected %d URLs via %s – starting screenshots…", len(discovery.urls), discovery.strategy)

    store = ResumeStore(config.output_dir, config.done_log, config.image_ext)
    done = store.load_done()

    browser = pool if pool is not None else BrowserPool(config)
    async with browser:
        handles = [await browser.open_handle() for _ in range(config.concurrency)]
        report = await DispatchEngine(config, handles, store).run(discovery.urls, done)

    report.strategy = discovery.strategy
    logger.info("Done – %s; screenshots saved to %s", report.summary(), config.output_dir)
    return report


class Engine:
    """Фасад для синхронного кода: загрузка конфига и запуск задачи через asyncio.run."""

    @staticmethod
    def load_config(path: Union[str, Path]) -> ShotConfig:
        """Загружает конфиг из YAML/JSON."""
        return load_config(path)

    def __init__(self, config: ShotConfig) -> None:
        self.config = config

    def start(self) -> JobReport:
        logger.info("Starting job for %s", self.config.root)
        return asyncio.run(run_job(self.config))

    def discover(self) -> Discovery:
        return asyncio.run(discover(self.config))
