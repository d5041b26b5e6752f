# File: site_shot/dispatcher.py
"""site_shot.dispatcher: Раздача URL по фиксированному пулу вкладок с повторами и паузами.

Каждый URL проходит Pending -> InFlight -> Done | FailedPermanently.
Назначение слота: по кругу по номеру среди непропущенных URL, без
перебалансировки: медленная вкладка не разгружается.
"""

from __future__ import annotations

import asyncio
from typing import AbstractSet, List, Optional, Sequence, Tuple

from site_shot.aggregator import ItemOutcome, JobReport, aggregate_outcomes
from site_shot.capture import CaptureHandle
from site_shot.config import ShotConfig
from site_shot.exceptions import NavigationFailure
from site_shot.logger import logger
from site_shot.resume import ResumeStore
from site_shot.utils import safe_key

__all__ = ["DispatchEngine"]

_Assignment = Tuple[int, str, str]


class DispatchEngine:
    """Главный цикл задачи: пропуск готового, раздача по слотам, повторы, журнал."""

    def __init__(self, config: ShotConfig, handles: Sequence[CaptureHandle], store: ResumeStore) -> None:
        if not handles:
            raise ValueError("DispatchEngine needs at least one capture handle")
        self.config = config
        self.handles = list(handles)
        self.store = store

    def key_for(self, url: str) -> str:
        return safe_key(url, self.config.safe_key_length, self.config.hashed_keys)

    def plan(
        self, urls: Sequence[str], done: AbstractSet[str]
    ) -> Tuple[List[Optional[ItemOutcome]], List[List[_Assignment]]]:
        """Делит URL на пропущенные и очереди слотов, сохраняя порядок обнаружения."""
        outcomes: List[Optional[ItemOutcome]] = [None] * len(urls)
        queues: List[List[_Assignment]] = [[] for _ in self.handles]
        claimed: set[str] = set()
        assigned = 0

        for index, url in enumerate(urls):
            key = self.key_for(url)
            if key in done:
                logger.debug("Skip (done): %s", url)
                outcomes[index] = ItemOutcome(url, key, "skipped")
                continue
            if key in claimed:
                logger.warning("SafeKey collision, skipping %s (key %s already assigned)", url, key)
                outcomes[index] = ItemOutcome(url, key, "skipped")
                continue
            claimed.add(key)
            queues[assigned % len(self.handles)].append((index, url, key))
            assigned += 1

        return outcomes, queues

    async def run(self, urls: Sequence[str], done: AbstractSet[str]) -> JobReport:
        outcomes, queues = self.plan(urls, done)
        pending = sum(len(q) for q in queues)
        logger.info(
            "Dispatch: %d URLs, %d already done, %d to capture on %d slots",
            len(urls), len(urls) - pending, pending, len(self.handles),
        )

        async with asyncio.TaskGroup() as group:
            for slot, (handle, queue) in enumerate(zip(self.handles, queues)):
                group.create_task(self._worker(slot, handle, queue, outcomes))

        return aggregate_outcomes(
            (o for o in outcomes if o is not None),
            root=self.config.root,
            output_dir=str(self.config.output_dir),
            image_ext=self.config.image_ext,
        )

    async def _worker(
        self,
        slot: int,
        handle: CaptureHandle,
        queue: List[_Assignment],
        outcomes: List[Optional[ItemOutcome]],
    ) -> None:
        for index, url, key in queue:
            outcomes[index] = await self._process(slot, handle, url, key)
            try:
                await handle.idle(self.config.delay_ms)
            except NavigationFailure as exc:
                logger.warning("Slot %d: pause after %s failed: %s", slot, url, exc)

    async def _process(self, slot: int, handle: CaptureHandle, url: str, key: str) -> ItemOutcome:
        path = self.config.output_dir / f"{key}{self.config.image_ext}"
        max_attempts = 1 + self.config.retry_limit
        last_error = ""

        for attempt in range(1, max_attempts + 1):
            try:
                await handle.navigate(url, self.config.nav_timeout)
                await handle.capture(path)
            except NavigationFailure as exc:
                last_error = str(exc)
                logger.debug("Attempt %d/%d failed for %s: %s", attempt, max_attempts, url, exc)
                continue
            try:
                self.store.mark_done(key)
            except OSError as exc:
                # the artifact on disk still marks the key as done on the next run
                logger.error("Cannot record %s in %s: %s", key, self.store.log_path, exc)
            logger.info("✔ %s", url)
            return ItemOutcome(url, key, "done", attempts=attempt, slot=slot)

        logger.error("✘ %s: %s", url, last_error)
        return ItemOutcome(url, key, "failed", attempts=max_attempts, slot=slot, error=last_error)
