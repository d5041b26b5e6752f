# File: site_shot/discovery.py
"""site_shot.discovery: Поиск URL сайта: сначала sitemap.xml, при неудаче обход ссылок."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from site_shot.config import ShotConfig
from site_shot.crawler.crawler import FallbackCrawler
from site_shot.crawler.fetcher import TextFetcher
from site_shot.exceptions import DiscoveryUnavailable, FetchFailure, InvalidURL, SitemapParseError
from site_shot.logger import logger
from site_shot.parser.sitemap_parser import SitemapDocument, parse_sitemap
from site_shot.utils import canonicalize, in_scope, remove_duplicates

__all__ = ["Discovery", "SitemapDiscoverer", "discover_urls"]

Strategy = Literal["sitemap", "crawl"]


@dataclass(frozen=True, slots=True)
class Discovery:
    """Итоговый неизменяемый набор URL и стратегия, которой он получен."""

    urls: Tuple[str, ...]
    strategy: Strategy


class SitemapDiscoverer:
    """Читает {root}/sitemap.xml и один уровень sitemap-индекса.

    Любая ошибка на любом шаге делает результат недоступным целиком:
    частичные данные sitemap не используются.
    """

    def __init__(self, config: ShotConfig, fetcher: TextFetcher) -> None:
        self.config = config
        self.fetcher = fetcher
        self.root = config.root

    @property
    def sitemap_url(self) -> str:
        return f"{self.root}/sitemap.xml"

    async def discover(self) -> Optional[Tuple[str, ...]]:
        """Возвращает канонические URL из sitemap или None, если sitemap недоступен."""
        try:
            raw = await self._collect()
        except DiscoveryUnavailable as exc:
            logger.warning("Sitemap unavailable (%s), falling back to crawling", exc)
            return None

        urls = self._canonical_in_scope(raw)
        if not urls:
            logger.warning("Sitemap %s lists no pages under %s, falling back to crawling", self.sitemap_url, self.root)
            return None
        logger.info("Sitemap: найдено %d URL", len(urls))
        return tuple(urls)

    async def _collect(self) -> List[str]:
        top = await self._load(self.sitemap_url)
        if not top.is_index:
            return list(top.locs)

        logger.debug("Sitemap index with %d children", len(top.locs))
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._load(loc)) for loc in top.locs]
        except ExceptionGroup as eg:
            unavailable, _ = eg.split(DiscoveryUnavailable)
            if unavailable is None:
                raise
            raise unavailable.exceptions[0] from None
        raw: List[str] = []
        for loc, task in zip(top.locs, tasks):
            child = task.result()
            if child.is_index:
                raise SitemapParseError(f"nested sitemap index at {loc}")
            raw.extend(child.locs)
        return raw

    async def _load(self, url: str) -> SitemapDocument:
        try:
            xml = await self.fetcher.fetch_text(url)
        except FetchFailure as exc:
            raise DiscoveryUnavailable(str(exc)) from exc
        return parse_sitemap(xml)

    def _canonical_in_scope(self, raw: List[str]) -> List[str]:
        urls: List[str] = []
        for loc in raw:
            if not in_scope(loc, self.root):
                continue
            try:
                urls.append(canonicalize(loc))
            except InvalidURL as exc:
                logger.warning("Skip sitemap entry: %s", exc)
        return remove_duplicates(urls)


async def discover_urls(config: ShotConfig, fetcher: TextFetcher) -> Discovery:
    """Собирает URL сайта: sitemap, а если он недоступен, обход ссылок в ширину."""
    urls = await SitemapDiscoverer(config, fetcher).discover()
    if urls is not None:
        return Discovery(urls=urls, strategy="sitemap")
    crawled = await FallbackCrawler(config, fetcher).crawl()
    return Discovery(urls=crawled, strategy="crawl")
