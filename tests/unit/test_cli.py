"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from uiforge.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.mark.unit
def test_catalog_lists_entries(cli_runner):
    result = cli_runner.invoke(app, ["catalog"])

    assert result.exit_code == 0
    assert "11 component(s) shown" in result.output


@pytest.mark.unit
def test_catalog_no_match(cli_runner):
    result = cli_runner.invoke(app, ["catalog", "zzz-no-such-thing"])

    assert result.exit_code == 0
    assert "No components found" in result.output


@pytest.mark.unit
def test_check_compiles_file(cli_runner, tmp_path: Path, login_form_source):
    source = tmp_path / "login-form.tsx"
    source.write_text(login_form_source, encoding="utf-8")

    result = cli_runner.invoke(app, ["check", "login-form", str(source)])

    assert result.exit_code == 0
    assert "Compiled LoginForm" in result.output


@pytest.mark.unit
def test_check_reports_failure(cli_runner, tmp_path: Path):
    source = tmp_path / "broken.tsx"
    source.write_text("function Broken( { return <div> }", encoding="utf-8")

    result = cli_runner.invoke(app, ["check", "broken", str(source)])

    assert result.exit_code == 1
    assert "Compilation failed" in result.output


@pytest.mark.unit
def test_export_writes_tree(cli_runner, tmp_path: Path):
    payload = tmp_path / "response.json"
    payload.write_text(json.dumps({"components": [{"type": "floating-navbar"}]}), encoding="utf-8")
    out = tmp_path / "site"

    result = cli_runner.invoke(app, ["export", str(payload), "--out", str(out)])

    assert result.exit_code == 0, result.output
    assert (out / "app" / "page.tsx").is_file()
    assert (out / "components" / "navigation" / "floating-navbar.tsx").is_file()
    assert "<FloatingNavbar" in (out / "app" / "page.tsx").read_text(encoding="utf-8")


@pytest.mark.unit
def test_export_unreadable_payload(cli_runner, tmp_path: Path):
    payload = tmp_path / "response.txt"
    payload.write_text("the model refused", encoding="utf-8")

    result = cli_runner.invoke(app, ["export", str(payload), "--out", str(tmp_path / "site")])

    assert result.exit_code == 1
    assert "Unreadable payload" in result.output
