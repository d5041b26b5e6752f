# File: site_shot/report/__init__.py
"""site_shot.report: Отчёты по запуску (JSON и HTML-галерея), используемые CLI и тестами."""

from .html_report import render_html
from .json_report import render_json

__all__ = ["render_json", "render_html"]
