# File: tests/test_cli.py
"""Тесты для CLI (`site_shot.cli`) с использованием click.testing.CliRunner.
Проверяют команды `run`, `discover`, `status`, `config`, `--version`, а также коды выхода.
"""
import asyncio
import json

import pytest
import site_shot.cli as cli_module
from click.testing import CliRunner
from site_shot.aggregator import JobReport
from site_shot.cli import cli
from site_shot.discovery import Discovery

ROOT = "https://example.com"
URLS = (f"{ROOT}/", f"{ROOT}/about", f"{ROOT}/pricing")


def make_report(failed=()):
    return JobReport(
        root=ROOT,
        output_dir="shots",
        strategy="sitemap",
        discovered=3,
        attempts=3,
        captured=[URLS[0]],
        skipped=[URLS[1]],
        failed=[{"url": u, "error": "net::ERR_FAILED"} for u in failed],
        artifacts={URLS[0]: "https___example_com_.png"},
    )


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def patch_discover(monkeypatch):
    """Патчим discover, чтобы не ходить в сеть."""

    async def fake_discover(cfg):
        return Discovery(urls=URLS, strategy="sitemap")

    monkeypatch.setattr(cli_module, "discover", fake_discover)


@pytest.fixture()
def patch_run_job(monkeypatch):
    """Патчим run_job; возвращает список полученных конфигов."""
    seen = []

    def install(report):
        async def fake_run_job(cfg):
            seen.append(cfg)
            return report

        monkeypatch.setattr(cli_module, "run_job", fake_run_job)
        return seen

    return install


@pytest.fixture(autouse=True)
def patch_reports(monkeypatch):
    """Патчим render_json и render_html для предсказуемости."""
    monkeypatch.setattr(cli_module, "render_json", lambda report, path, pretty=True: str(path))
    monkeypatch.setattr(cli_module, "render_html", lambda report, tpl, path: str(path))


def test_version_option(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteShot" in result.output


def test_show_config_merges_file_and_argument(runner, tmp_path):
    cfg_file = tmp_path / "site.json"
    cfg_file.write_text(json.dumps({"base_url": "https://other.org", "concurrency": 4}), encoding="utf-8")

    result = runner.invoke(cli, ["--config", str(cfg_file), "config", ROOT])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["base_url"].rstrip("/") == ROOT
    assert data["concurrency"] == 4


def test_config_error_exits_with_one(runner):
    result = runner.invoke(cli, ["config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_run_success(runner, tmp_path, patch_run_job):
    seen = patch_run_job(make_report())
    result = runner.invoke(
        cli,
        ["run", ROOT, "--out", str(tmp_path / "shots"), "--concurrency", "2", "--retries", "0", "--delay", "0"],
    )

    assert result.exit_code == 0, result.output
    assert "1 captured, 1 skipped, 0 failed of 3" in result.output
    cfg = seen[0]
    assert cfg.concurrency == 2
    assert cfg.retry_limit == 0
    assert cfg.output_dir == tmp_path / "shots"
    assert cfg.done_log == tmp_path / "shots" / "completed.log"


def test_run_partial_failure_exit_code(runner, tmp_path, patch_run_job):
    patch_run_job(make_report(failed=[URLS[2]]))
    result = runner.invoke(cli, ["run", ROOT, "--out", str(tmp_path)])
    assert result.exit_code == 3
    assert "1 failed" in result.output


def test_run_writes_reports(runner, tmp_path, patch_run_job):
    patch_run_job(make_report())
    json_path = tmp_path / "report.json"
    html_path = tmp_path / "index.html"
    result = runner.invoke(
        cli, ["run", ROOT, "--out", str(tmp_path), "--json", str(json_path), "--gallery", str(html_path)]
    )
    assert result.exit_code == 0, result.output
    assert f"JSON report: {json_path}" in result.output
    assert f"HTML gallery: {html_path}" in result.output


def test_run_pretty_prints_report(runner, tmp_path, patch_run_job):
    patch_run_job(make_report())
    result = runner.invoke(cli, ["run", ROOT, "--out", str(tmp_path), "--pretty"])
    assert result.exit_code == 0, result.output
    assert '"strategy": "sitemap"' in result.output


def test_run_job_timeout(runner, tmp_path, monkeypatch):
    async def slow_run_job(cfg):
        await asyncio.sleep(5)

    monkeypatch.setattr(cli_module, "run_job", slow_run_job)
    result = runner.invoke(cli, ["run", ROOT, "--out", str(tmp_path), "--job-timeout", "0.05"])
    assert result.exit_code == 1
    assert "Задача не завершена" in result.output


def test_run_fatal_error(runner, tmp_path, monkeypatch):
    async def broken_run_job(cfg):
        raise OSError("read-only file system")

    monkeypatch.setattr(cli_module, "run_job", broken_run_job)
    result = runner.invoke(cli, ["run", ROOT, "--out", str(tmp_path)])
    assert result.exit_code == 1
    assert "read-only file system" in result.output


def test_discover_prints_urls(runner):
    result = runner.invoke(cli, ["discover", ROOT])
    assert result.exit_code == 0, result.output
    assert [line for line in result.output.splitlines() if line.startswith("http")] == list(URLS)


def test_discover_json(runner, tmp_path):
    out = tmp_path / "urls.json"
    result = runner.invoke(cli, ["discover", ROOT, "--json", str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data == {"root": ROOT, "strategy": "sitemap", "urls": list(URLS)}


def test_status_counts_finished(runner, tmp_path):
    out = tmp_path / "shots"
    out.mkdir()
    (out / "https___example_com_.png").write_bytes(b"png")
    (out / "completed.log").write_text("https___example_com_about\n", encoding="utf-8")

    result = runner.invoke(cli, ["status", ROOT, "--out", str(out)])

    assert result.exit_code == 0, result.output
    assert "2/3 done (sitemap), 1 pending" in result.output
