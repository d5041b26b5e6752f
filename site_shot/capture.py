# site_shot/capture.py
"""
Capture collaborator: full-page screenshots through headless Chromium (Playwright).

The dispatch loop only depends on the :class:`CaptureHandle` protocol; the
Playwright-backed :class:`PageHandle` and :class:`BrowserPool` are the
production implementation.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Protocol

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from site_shot.config import ShotConfig
from site_shot.exceptions import CaptureUnavailable, NavigationFailure

__all__ = ("CaptureHandle", "PageHandle", "BrowserPool")

logger = logging.getLogger("SiteShot")


class CaptureHandle(Protocol):
    """One capture-capable tab. Failures raise NavigationFailure."""

    async def navigate(self, url: str, timeout: float) -> None: ...

    async def capture(self, path: Path) -> None: ...

    async def idle(self, ms: int) -> None: ...

    async def close(self) -> None: ...


class PageHandle:
    """A single browser tab wrapped into the CaptureHandle interface."""

    def __init__(self, page: Page) -> None:
        self.page = page
        self._url = ""

    async def navigate(self, url: str, timeout: float) -> None:
        """Open *url* and wait for network idle; *timeout* is in seconds."""
        self._url = url
        try:
            await self.page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
        except PlaywrightError as exc:
            raise NavigationFailure(url, exc.message) from exc

    async def capture(self, path: Path) -> None:
        try:
            await self.page.screenshot(path=str(path), full_page=True)
        except PlaywrightError as exc:
            raise NavigationFailure(self._url, exc.message) from exc

    async def idle(self, ms: int) -> None:
        if ms <= 0:
            return
        try:
            await self.page.wait_for_timeout(ms)
        except PlaywrightError as exc:
            raise NavigationFailure(self._url, exc.message) from exc

    async def close(self) -> None:
        if not self.page.is_closed():
            await self.page.close()


class BrowserPool:
    """Starts Playwright and Chromium, hands out tabs, tears everything down on exit."""

    def __init__(self, config: ShotConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._handles: List[PageHandle] = []

    async def __aenter__(self) -> BrowserPool:
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=True)
        except PlaywrightError as exc:
            await self._shutdown()
            raise CaptureUnavailable(f"cannot launch Chromium: {exc.message}") from exc
        logger.debug("Chromium launched (%s)", self._browser.version)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._shutdown()

    async def open_handle(self) -> PageHandle:
        if self._browser is None:
            raise RuntimeError("Browser not started")
        page = await self._browser.new_page(
            viewport={"width": self.config.viewport_width, "height": self.config.viewport_height},
        )
        handle = PageHandle(page)
        self._handles.append(handle)
        return handle

    async def _shutdown(self) -> None:
        for handle in self._handles:
            try:
                await handle.close()
            except PlaywrightError as exc:
                logger.debug("Tab close failed: %s", exc.message)
        self._handles.clear()
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
