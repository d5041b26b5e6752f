# site_shot/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteShot.

Сериализация объекта JobReport в файл.
"""
from pathlib import Path

from site_shot.aggregator import JobReport


def render_json(report: JobReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект JobReport с итогами запуска
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_shot.report.json_report import render_json
    report_path = render_json(report, 'reports/job.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=pretty), encoding="utf-8")
    return output
