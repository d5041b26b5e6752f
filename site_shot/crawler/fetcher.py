# site_shot/crawler/fetcher.py
"""
Fetcher module: downloads sitemap XML and page HTML as text, with retry/backoff and timeout.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_shot.config import ShotConfig
from site_shot.exceptions import FetchFailure
from site_shot.logger import logger

__all__ = ("Fetcher", "TextFetcher", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class TextFetcher(Protocol):
    """Anything that can turn a URL into text or raise FetchFailure."""

    async def fetch_text(self, url: str) -> str: ...


class Fetcher:
    """Handles HTTP text fetching with retries/backoff and timeout.

    Use as an async context manager to own a session, or pass an existing
    :class:`aiohttp.ClientSession` which is then left open on exit.
    """

    def __init__(
        self,
        config: ShotConfig,
        session: Optional[ClientSession] = None,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._retry_status = retry_status

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.fetch_timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
            self.session = None

    async def fetch_text(self, url: str) -> str:
        """
        Fetch *url* and return the decoded body.

        Raises FetchFailure on network errors, timeouts and HTTP statuses >= 400.
        Statuses in ``retry_status`` are retried ``fetch_retries`` times.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized")

        attempts = 0
        while True:
            try:
                async with self.session.get(url, timeout=ClientTimeout(total=self.config.fetch_timeout)) as resp:
                    if resp.status in self._retry_status:
                        raise ClientError(f"retryable status {resp.status}")
                    if resp.status >= 400:
                        raise FetchFailure(url, f"HTTP {resp.status}", status=resp.status)
                    return await resp.text(errors="replace")
            except asyncio.TimeoutError as exc:
                raise FetchFailure(url, f"timed out after {self.config.fetch_timeout}s") from exc
            except ClientError as exc:
                attempts += 1
                if attempts > self.config.fetch_retries:
                    raise FetchFailure(url, str(exc) or type(exc).__name__) from exc
                # exponential backoff, cap at 60s
                backoff = min(2**attempts, 60)
                logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.config.fetch_retries, url, backoff)
                await asyncio.sleep(backoff)
