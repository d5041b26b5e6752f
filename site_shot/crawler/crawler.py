# === FILE: site_shot/crawler/crawler.py ===
from __future__ import annotations

import logging
import time
from collections import deque
from typing import Deque, List, Set, Tuple

from site_shot.config import ShotConfig
from site_shot.crawler.fetcher import TextFetcher
from site_shot.crawler.link_extractor import extract_links
from site_shot.crawler.models import FrontierItem
from site_shot.exceptions import FetchFailure, InvalidURL
from site_shot.utils import canonicalize

__all__ = ("FallbackCrawler",)


class FallbackCrawler:
    """Breadth-first link follower bounded by depth and total page count.

    Each dequeued item is consumed once: already seen or too deep items are
    dropped without a fetch. A page whose HTML cannot be fetched stays in the
    result and contributes no links.
    """

    def __init__(self, config: ShotConfig, fetcher: TextFetcher) -> None:
        self.config = config
        self.fetcher = fetcher
        self.root = config.root
        self.seen: Set[str] = set()
        self.failed_fetches: List[str] = []
        self.logger = logging.getLogger("SiteShot")

    async def crawl(self) -> Tuple[str, ...]:
        self.logger.info("Старт обхода: %s (depth<=%d, pages<=%d)", self.root, self.config.max_depth, self.config.max_pages)
        start = time.monotonic()
        queue: Deque[FrontierItem] = deque([FrontierItem(self.root, 0)])
        accepted: List[str] = []

        while queue and len(accepted) < self.config.max_pages:
            item = queue.popleft()
            try:
                canon = canonicalize(item.href)
            except InvalidURL as exc:
                self.logger.debug("Skip %s", exc)
                continue
            if canon in self.seen or item.depth > self.config.max_depth:
                continue
            self.seen.add(canon)
            accepted.append(canon)

            for link in await self._links(canon):
                queue.append(FrontierItem(link, item.depth + 1))

        duration = time.monotonic() - start
        self.logger.info("Обход завершён: %d страниц за %.2f с", len(accepted), duration)
        if self.failed_fetches:
            self.logger.info("Не удалось загрузить: %d", len(self.failed_fetches))
        return tuple(accepted)

    async def _links(self, url: str) -> List[str]:
        try:
            html = await self.fetcher.fetch_text(url)
        except FetchFailure as exc:
            self.failed_fetches.append(url)
            self.logger.warning("Fetch failed, keeping page without links: %s", exc)
            return []
        return extract_links(html, self.root)
