from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from cutrel import __version__
from cutrel.cli.app import app

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "release" in result.output
    assert "dev-release" in result.output


def test_release_in_missing_workspace(tmp_path: Path) -> None:
    result = runner.invoke(app, ["release", "--workspace", str(tmp_path / "nope")])
    assert result.exit_code == 1
