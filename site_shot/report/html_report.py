"""site_shot.report.html_report: HTML-галерея снятых страниц с помощью Jinja2."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_shot.aggregator import JobReport

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "gallery.html.j2"


def render_html(
    report: JobReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит галерею скриншотов из шаблона и сохраняет её по указанному пути.

    Ссылки на изображения относительны к папке итогового HTML-файла.

    Args:
        report: объект JobReport.
        template_dir: директория с шаблоном gallery.html.j2 (None: встроенный).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    shots_dir = Path(report.output_dir)
    shots = []
    for url in report.captured:
        image = shots_dir / report.artifacts[url]
        shots.append({"url": url, "src": Path(os.path.relpath(image, output_path.parent)).as_posix()})

    context: dict[str, Any] = {
        "root": report.root,
        "strategy": report.strategy,
        "summary": report.summary(),
        "shots": shots,
        "failed": report.failed,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
