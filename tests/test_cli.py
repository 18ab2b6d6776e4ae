"""Tests for the root quotectl CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from quotectl import __version__
from quotectl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "quotectl" in result.output
    for command in ("calculate", "items", "summarize"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


def test_quiet_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-q", "--version"])
    assert result.exit_code == 0


def test_log_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--log-json", "--version"])
    assert result.exit_code == 0


def test_catalog_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--catalog", "catalog.json", "--version"])
    assert result.exit_code == 0


def test_malformed_config_reported(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("QUOTECTL_CONFIG", raising=False)
    (tmp_path / "quotectl.toml").write_text("[pricing\n")
    result = cli_runner.invoke(cli, ["items", "list"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.stderr
