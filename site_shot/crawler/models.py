# site_shot/crawler/models.py
"""
Data models for the SiteShot fallback crawler.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FrontierItem:
    """A discovered link waiting in the crawl queue, with its distance from the root."""

    href: str
    depth: int = 0
