# site_shot/crawler/link_extractor.py
"""
Link extraction for the SiteShot fallback crawler.

Links are pulled out of raw HTML with a regular expression over
``href="..."`` attributes instead of a DOM parse. Links injected through
single-quoted or unquoted attributes, ``srcset`` or scripts are missed.
"""
from __future__ import annotations

import html
import re
from typing import List
from urllib.parse import urljoin

from site_shot.utils import in_scope

_HREF_RE = re.compile(r'href="([^"]+)"')
_SKIP_PREFIXES = ("mailto:", "javascript:", "tel:", "data:", "#")


def extract_hrefs(page: str) -> List[str]:
    """Return every double-quoted ``href`` value in document order, entities decoded."""
    return [html.unescape(m.group(1)).strip() for m in _HREF_RE.finditer(page)]


def extract_links(page: str, root: str) -> List[str]:
    """
    Extract same-site absolute links from raw HTML.

    Relative hrefs are resolved against *root*; anything that does not start
    with *root* after resolution is dropped.
    """
    base = root.rstrip("/") + "/"
    links: List[str] = []
    for href in extract_hrefs(page):
        if not href or href.lower().startswith(_SKIP_PREFIXES):
            continue
        absolute = urljoin(base, href)
        if in_scope(absolute, root):
            links.append(absolute)
    return links
