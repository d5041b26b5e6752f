# File: site_shot/aggregator.py
"""site_shot.aggregator: Сводка по задаче: что снято, пропущено и не удалось."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Literal, Optional, TypedDict

__all__ = ["ItemOutcome", "FailureInfo", "JobReport", "aggregate_outcomes"]

Status = Literal["done", "skipped", "failed"]


@dataclass(slots=True)
class ItemOutcome:
    """Итог обработки одного URL диспетчером."""

    url: str
    key: str
    status: Status
    attempts: int = 0
    slot: Optional[int] = None
    error: Optional[str] = None


class FailureInfo(TypedDict):
    """URL, который не удалось снять после всех попыток."""

    url: str
    error: str


@dataclass(slots=True)
class JobReport:
    """Результаты одного запуска: снятые, пропущенные и окончательно упавшие URL."""

    root: str = ""
    output_dir: str = ""
    strategy: str = ""
    discovered: int = 0
    attempts: int = 0
    captured: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[FailureInfo] = field(default_factory=list)
    #: URL -> имя файла скриншота в output_dir
    artifacts: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление JobReport."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)

    def summary(self) -> str:
        return (
            f"{len(self.captured)} captured, {len(self.skipped)} skipped, "
            f"{len(self.failed)} failed of {self.discovered}"
        )


def aggregate_outcomes(
    outcomes: Iterable[ItemOutcome],
    *,
    root: str = "",
    output_dir: str = "",
    strategy: str = "",
    image_ext: str = ".png",
) -> JobReport:
    """Собирает итоги по URL (в порядке обнаружения) в JobReport."""
    report = JobReport(root=root, output_dir=output_dir, strategy=strategy)
    for outcome in outcomes:
        report.discovered += 1
        report.attempts += outcome.attempts
        if outcome.status == "done":
            report.captured.append(outcome.url)
            report.artifacts[outcome.url] = f"{outcome.key}{image_ext}"
        elif outcome.status == "skipped":
            report.skipped.append(outcome.url)
        else:
            report.failed.append({"url": outcome.url, "error": outcome.error or ""})
    return report
