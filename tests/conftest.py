# File: tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import pytest

from site_shot.config import ShotConfig
from site_shot.exceptions import FetchFailure, NavigationFailure
from site_shot.logger import configure

ROOT = "https://example.com"

PageSource = Union[Dict[str, Union[str, Exception]], Callable[[str], Optional[str]]]


class FakeFetcher:
    """In-memory fetcher: a dict of url -> body (or exception), or a callable url -> body|None."""

    def __init__(self, pages: PageSource) -> None:
        self.pages = pages
        self.calls: List[str] = []

    async def fetch_text(self, url: str) -> str:
        self.calls.append(url)
        body = self.pages(url) if callable(self.pages) else self.pages.get(url)
        if body is None:
            raise FetchFailure(url, "HTTP 404", status=404)
        if isinstance(body, Exception):
            raise body
        return body


class FakeHandle:
    """Capture handle that writes a tiny file instead of a screenshot.

    ``fail`` makes every attempt for those URLs fail; ``flaky`` maps a URL to
    the number of attempts that fail before one succeeds.
    """

    def __init__(self, fail: Optional[set] = None, flaky: Optional[Dict[str, int]] = None, fail_all: bool = False) -> None:
        self.fail = set(fail or ())
        self.flaky = dict(flaky or {})
        self.fail_all = fail_all
        self.navigations: List[str] = []
        self.captures: List[Path] = []
        self.idles: List[int] = []
        self.closed = False

    async def navigate(self, url: str, timeout: float) -> None:
        self.navigations.append(url)
        if self.fail_all or url in self.fail:
            raise NavigationFailure(url, "net::ERR_CONNECTION_REFUSED")
        if self.flaky.get(url, 0) > 0:
            self.flaky[url] -= 1
            raise NavigationFailure(url, "Timeout 30000ms exceeded")

    async def capture(self, path: Path) -> None:
        Path(path).write_bytes(b"\x89PNG\r\n")
        self.captures.append(Path(path))

    async def idle(self, ms: int) -> None:
        self.idles.append(ms)

    async def close(self) -> None:
        self.closed = True


class FakePool:
    """Stands in for BrowserPool: hands out FakeHandles built by *factory*."""

    def __init__(self, factory: Callable[[], FakeHandle] = FakeHandle) -> None:
        self.factory = factory
        self.handles: List[FakeHandle] = []
        self.entered = False

    async def __aenter__(self) -> FakePool:
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        for handle in self.handles:
            await handle.close()

    async def open_handle(self) -> FakeHandle:
        handle = self.factory()
        self.handles.append(handle)
        return handle


@pytest.fixture(autouse=True)
def reset_logger():
    """CliRunner swaps stdout; give every test a fresh console handler afterwards."""
    yield
    configure(level="INFO")


@pytest.fixture()
def make_config(tmp_path) -> Callable[..., ShotConfig]:
    """Factory for a fast ShotConfig rooted at example.com writing into tmp_path."""

    def _make(**overrides) -> ShotConfig:
        data = dict(
            base_url=ROOT,
            output_dir=tmp_path / "shots",
            delay=0,
            fetch_retries=0,
            concurrency=1,
        )
        data.update(overrides)
        return ShotConfig(**data)

    return _make


@pytest.fixture()
def fake_fetcher():
    return FakeFetcher


@pytest.fixture()
def fake_handle():
    return FakeHandle


@pytest.fixture()
def fake_pool():
    return FakePool


def urlset(*locs: str) -> str:
    entries = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</urlset>'


def sitemap_index(*locs: str) -> str:
    entries = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</sitemapindex>'


@pytest.fixture()
def xml_builders():
    return urlset, sitemap_index
