from __future__ import annotations

from pathlib import Path

import pytest

from cutrel.core.result import Err, Ok, Result
from cutrel.platform.process import ProcessError
from cutrel.services.release import changesets as changesets_mod

COMMAND = ("pnpm", "changeset")


def test_count_pending_changesets(tmp_path: Path) -> None:
    changeset_dir = tmp_path / ".changeset"
    changeset_dir.mkdir()
    (changeset_dir / "README.md").write_text("docs", encoding="utf-8")
    (changeset_dir / "config.json").write_text("{}", encoding="utf-8")
    (changeset_dir / "brave-owls-sing.md").write_text("---\n'a': minor\n---\n", encoding="utf-8")
    (changeset_dir / "quiet-cats-run.md").write_text("---\n'b': patch\n---\n", encoding="utf-8")

    assert changesets_mod.count_pending_changesets(workspace_root=tmp_path) == Ok(2)


def test_count_without_changeset_dir(tmp_path: Path) -> None:
    assert changesets_mod.count_pending_changesets(workspace_root=tmp_path) == Ok(0)


def test_count_only_readme(tmp_path: Path) -> None:
    (tmp_path / ".changeset").mkdir()
    (tmp_path / ".changeset" / "README.md").write_text("docs", encoding="utf-8")
    assert changesets_mod.count_pending_changesets(workspace_root=tmp_path) == Ok(0)


def test_subcommands(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], cwd: Path) -> Result[str, ProcessError]:
        assert cwd == tmp_path
        calls.append(cmd)
        return Ok(f"{cmd[-1]} output")

    monkeypatch.setattr(changesets_mod, "run_process", fake_run)

    assert changesets_mod.changeset_status(workspace_root=tmp_path, command=COMMAND) == Ok(
        "status output"
    )
    assert changesets_mod.changeset_version(workspace_root=tmp_path, command=COMMAND) == Ok(
        "version output"
    )
    assert changesets_mod.changeset_tag(workspace_root=tmp_path, command=COMMAND) == Ok(
        "tag output"
    )
    assert calls == [
        ["pnpm", "changeset", "status"],
        ["pnpm", "changeset", "version"],
        ["pnpm", "changeset", "tag"],
    ]


def test_failure_carries_stderr(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], cwd: Path) -> Result[str, ProcessError]:
        del cwd
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=1,
                stdout="",
                stderr="🦋  error Some packages have been changed but no changesets were found\n",
            )
        )

    monkeypatch.setattr(changesets_mod, "run_process", fake_run)

    result = changesets_mod.changeset_status(workspace_root=tmp_path, command=COMMAND)
    assert isinstance(result, Err)
    assert result.error.kind == "changeset_failed"
    assert result.error.message == "pnpm changeset status failed (exit 1)"
    assert result.error.hint is not None
    assert "no changesets were found" in result.error.hint
