# File: site_shot/parser/sitemap_parser.py
"""site_shot.parser.sitemap_parser: Модуль для парсинга sitemap.xml и извлечения URL."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

from lxml import etree

from site_shot.exceptions import SitemapParseError

__all__ = ("SitemapDocument", "parse_sitemap")

SitemapKind = Literal["urlset", "sitemapindex"]


@dataclass(frozen=True, slots=True)
class SitemapDocument:
    """Разобранный sitemap: тип корневого элемента и значения <loc> по порядку."""

    kind: SitemapKind
    locs: Tuple[str, ...]

    @property
    def is_index(self) -> bool:
        return self.kind == "sitemapindex"


def parse_sitemap(xml_content: str | bytes) -> SitemapDocument:
    """Разбирает XML sitemap и возвращает SitemapDocument.

    Для <urlset> берутся <url>/<loc>, для <sitemapindex>: <sitemap>/<loc>.
    Парсер работает в строгом режиме: частично испорченный документ не
    восстанавливается, а отвергается целиком.

    Args:
        xml_content: содержимое sitemap.xml (строка или байты).

    Raises:
        SitemapParseError: документ не является корректным XML или корень не
            ``urlset``/``sitemapindex``.

    Пример:
    ```python
    from site_shot.parser.sitemap_parser import parse_sitemap

    doc = parse_sitemap(open('sitemap.xml', encoding='utf-8').read())
    print(doc.kind, doc.locs)
    ```
    """
    data = xml_content.encode("utf-8") if isinstance(xml_content, str) else xml_content
    if not data.strip():
        raise SitemapParseError("empty sitemap document")

    parser = etree.XMLParser(ns_clean=True, recover=False, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data.strip(), parser=parser)
    except etree.XMLSyntaxError as exc:
        raise SitemapParseError(f"malformed sitemap XML: {exc}") from exc

    kind = etree.QName(root).localname
    if kind == "urlset":
        child = "url"
    elif kind == "sitemapindex":
        child = "sitemap"
    else:
        raise SitemapParseError(f"unexpected sitemap root element <{kind}>")

    locs = root.findall(f"{{*}}{child}/{{*}}loc")
    return SitemapDocument(kind=kind, locs=tuple(loc.text.strip() for loc in locs if loc.text and loc.text.strip()))
