from __future__ import annotations

import json
import logging
from pathlib import Path

from typer.testing import CliRunner

from ctclsite.cli import app


def test_check_reports_clean_site(site_project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["check", "--config", str(site_project)])

    assert result.exit_code == 0, result.output
    assert "Check clean" in result.output
    assert "5 page(s)" in result.output


def test_check_fails_on_unresolvable_page(site_project: Path) -> None:
    runner = CliRunner()
    (site_project / "pages" / "blog" / "first.md").unlink()

    result = runner.invoke(app, ["check", "-c", str(site_project / "ctclsite.json")])

    assert result.exit_code == 1
    assert "blog/first-post" in result.output


def test_build_writes_output_dir(site_project: Path) -> None:
    runner = CliRunner()
    output_dir = site_project / "public_html"

    result = runner.invoke(app, ["build", "-c", str(site_project), "--output-dir", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert "Build complete" in result.output
    assert (output_dir / "index.html").exists()
    assert (output_dir / "projects" / "site" / "index.html").exists()
    assert (output_dir / "static" / "robots.txt").exists()


def test_invalid_config_is_a_usage_error(tmp_path: Path) -> None:
    runner = CliRunner()
    config_path = tmp_path / "ctclsite.json"
    config_path.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["check", "-c", str(config_path)])

    assert result.exit_code == 2


def test_load_failure_exits_with_error(site_project: Path) -> None:
    runner = CliRunner()
    config_path = site_project / "ctclsite.json"
    data = json.loads(config_path.read_text(encoding="utf-8"))
    data["defaulttheme"] = "missing"
    config_path.write_text(json.dumps(data), encoding="utf-8")

    result = runner.invoke(app, ["build", "-c", str(site_project)])

    assert result.exit_code == 1
    assert "Site load failed" in result.output
    assert not (site_project / "public").exists()


def test_logging_config_file_is_applied(site_project: Path) -> None:
    runner = CliRunner()
    (site_project / "logging.yml").write_text(
        "version: 1\n"
        "disable_existing_loggers: false\n"
        "loggers:\n"
        "  ctclsite:\n"
        "    level: WARNING\n",
        encoding="utf-8",
    )
    config_path = site_project / "ctclsite.json"
    data = json.loads(config_path.read_text(encoding="utf-8"))
    data["logconfig"] = "logging.yml"
    config_path.write_text(json.dumps(data), encoding="utf-8")

    result = runner.invoke(app, ["check", "-c", str(site_project)])

    assert result.exit_code == 0, result.output
    assert logging.getLogger("ctclsite").level == logging.WARNING
    logging.getLogger("ctclsite").setLevel(logging.NOTSET)
