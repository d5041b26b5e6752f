# File: site_shot/exceptions.py
"""site_shot.exceptions: Иерархия исключений SiteShot.

Ошибки уровня одного URL (InvalidURL, FetchFailure, NavigationFailure)
обрабатываются на границе этого URL и не прерывают задачу. Фатальными
считаются только CaptureUnavailable и ошибки создания выходной директории.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "SiteShotError",
    "InvalidURL",
    "DiscoveryUnavailable",
    "SitemapParseError",
    "FetchFailure",
    "NavigationFailure",
    "CaptureUnavailable",
]


class SiteShotError(Exception):
    """Базовый класс всех ошибок пакета."""


class InvalidURL(SiteShotError, ValueError):
    """URL не удалось разобрать или он не абсолютный http(s)."""

    def __init__(self, url: object, reason: str = "malformed URL") -> None:
        super().__init__(f"{reason}: {url!r}")
        self.url = url
        self.reason = reason


class DiscoveryUnavailable(SiteShotError):
    """Sitemap недоступен или непригоден; вызывающий код переходит к обходу ссылок."""


class SitemapParseError(DiscoveryUnavailable):
    """Документ sitemap не является корректным <urlset> или <sitemapindex>."""


class FetchFailure(SiteShotError):
    """HTTP-загрузка текста не удалась (сеть, таймаут или статус >= 400)."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status = status


class NavigationFailure(SiteShotError):
    """Попытка открыть страницу или снять скриншот завершилась ошибкой."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class CaptureUnavailable(SiteShotError):
    """Браузер не удалось запустить."""
