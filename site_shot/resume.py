# File: site_shot/resume.py
"""site_shot.resume: Состояние возобновления: какие SafeKey уже сняты.

Два независимых источника объединяются:

* файлы-скриншоты в выходной папке (истина о том, что снимок существует);
* журнал завершённых ключей, в который после каждого успеха дописывается строка.

Журнал только дописывается и не дедуплицируется: повторы поглощаются
множеством при следующей загрузке. Один запуск на одну выходную папку.
"""

from __future__ import annotations

from pathlib import Path
from typing import Set, Union

from site_shot.logger import logger

__all__ = ["ResumeStore"]


class ResumeStore:
    """Читает и пополняет набор завершённых SafeKey."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        log_path: Union[str, Path],
        image_ext: str = ".png",
    ) -> None:
        self.output_dir = Path(output_dir)
        self.log_path = Path(log_path)
        self.image_ext = image_ext

    def artifact_keys(self) -> Set[str]:
        """Ключи, для которых в выходной папке уже лежит файл скриншота."""
        if not self.output_dir.is_dir():
            return set()
        cut = len(self.image_ext)
        return {
            p.name[:-cut]
            for p in self.output_dir.iterdir()
            if p.is_file() and p.name.endswith(self.image_ext) and len(p.name) > cut
        }

    def logged_keys(self) -> Set[str]:
        """Ключи из журнала; отсутствующий журнал: пустое множество."""
        if not self.log_path.is_file():
            return set()
        text = self.log_path.read_text(encoding="utf-8")
        return {line.strip() for line in text.splitlines() if line.strip()}

    def load_done(self) -> Set[str]:
        """Объединение артефактов и журнала."""
        artifacts = self.artifact_keys()
        logged = self.logged_keys()
        done = artifacts | logged
        logger.debug(
            "Resume state: %d artifacts, %d logged, %d done", len(artifacts), len(logged), len(done)
        )
        return done

    def mark_done(self, key: str) -> None:
        """Дописывает ключ в журнал синхронно, до возврата управления."""
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with self.log_path.open("a", encoding="utf-8") as f:
            f.write(f"{key}\n")
            f.flush()
