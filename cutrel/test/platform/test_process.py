"""Tests for cutrel.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from cutrel.core.result import Err, Ok
from cutrel.platform.process import ProcessError, run


class TestProcessError:
    """Test ProcessError dataclass."""

    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("pnpm", "changeset", "version", "--snapshot"),
            returncode=2,
            stdout="",
            stderr="error",
        )
        assert str(error) == "pnpm changeset version ... failed (exit 2)"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    """Test run() against the running interpreter."""

    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert result.value.strip() == "hello"

    def test_failure_carries_output(self, tmp_path: Path) -> None:
        script = "import sys; print('out'); sys.stderr.write('bad'); sys.exit(3)"
        result = run([sys.executable, "-c", script], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stdout.strip() == "out"
        assert result.error.stderr == "bad"

    def test_uses_cwd(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert Path(result.value.strip()).resolve() == tmp_path.resolve()

    def test_env_is_forwarded(self, tmp_path: Path) -> None:
        script = "import os; print(os.environ['CUTREL_PROBE'])"
        result = run([sys.executable, "-c", script], cwd=tmp_path, env={"CUTREL_PROBE": "yes"})
        assert isinstance(result, Ok)
        assert result.value.strip() == "yes"

    def test_missing_binary(self, tmp_path: Path) -> None:
        result = run(["cutrel-definitely-not-a-binary"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert result.error.command == ("cutrel-definitely-not-a-binary",)
