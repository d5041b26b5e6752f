# File: site_shot/utils.py
"""site_shot.utils: Канонизация URL, вычисление SafeKey и мелкие помощники для списков URL."""

from __future__ import annotations

import hashlib
import re
from typing import Collection, List, Sequence
from urllib.parse import unquote_plus, urlsplit, urlunsplit

from site_shot.exceptions import InvalidURL
from site_shot.logger import logger

__all__: Sequence[str] = (
    "TRACKING_PREFIX",
    "canonicalize",
    "safe_key",
    "in_scope",
    "remove_duplicates",
)

#: query-параметры с таким префиксом ключа считаются трекинговыми
TRACKING_PREFIX = "utm_"

_DEFAULT_PORTS = {"http": 80, "https": 443}
_UNSAFE_RE = re.compile(r"[^\w]", re.ASCII)
_HASH_LEN = 10


def _strip_tracking(query: str) -> str:
    """Удаляет utm_*-параметры, сохраняя порядок и исходное кодирование остальных."""
    kept = [
        pair
        for pair in query.split("&")
        if pair and not unquote_plus(pair.split("=", 1)[0]).startswith(TRACKING_PREFIX)
    ]
    return "&".join(kept)


def canonicalize(url: str) -> str:
    """Приводит URL к ключу дедупликации: без фрагмента и без трекинговых параметров.

    Схема и хост переводятся в нижний регистр, порт по умолчанию убирается,
    пустой путь становится ``/``. Функция идемпотентна.

    Raises:
        InvalidURL: если строка не является абсолютным http(s) URL.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURL(url, "empty URL")

    head = url.strip().split("#", 1)[0]
    try:
        parts = urlsplit(head)
        port = parts.port
    except ValueError as exc:
        raise InvalidURL(url, str(exc)) from exc

    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise InvalidURL(url, "unsupported scheme")
    if not parts.hostname:
        raise InvalidURL(url, "missing host")

    userinfo, at, hostport = parts.netloc.rpartition("@")
    hostport = hostport.lower()
    if port is not None and port == _DEFAULT_PORTS[scheme]:
        hostport = hostport.rsplit(":", 1)[0]
    netloc = f"{userinfo}{at}{hostport}"

    canonical = urlunsplit((scheme, netloc, parts.path or "/", _strip_tracking(parts.query), ""))
    logger.debug("Canonical URL: %s -> %s", url, canonical)
    return canonical


def safe_key(url: str, length: int = 120, with_hash: bool = False) -> str:
    """Возвращает имя файла для URL: не-словесные символы заменены на ``_``, длина ограничена.

    Разные URL с общим префиксом могут совпасть после обрезки; с ``with_hash``
    к ключу добавляется короткий sha1 полного URL.
    """
    key = _UNSAFE_RE.sub("_", url)
    if not with_hash:
        return key[:length]
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:_HASH_LEN]
    return f"{key[:length - _HASH_LEN - 1]}_{digest}"


def in_scope(url: str, root: str) -> bool:
    """Проверяет, что URL начинается с корня сайта (на границе пути, query или фрагмента)."""
    root = root.rstrip("/")
    if not url.startswith(root):
        return False
    rest = url[len(root):]
    return not rest or rest[0] in "/?#"


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
