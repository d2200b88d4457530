from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from cutrel.core.result import Err, Ok, Result
from cutrel.platform.process import run as run_process
from cutrel.services.release.errors import ReleaseError

CHANGESET_DIR = ".changeset"


def count_pending_changesets(*, workspace_root: Path) -> Result[int, ReleaseError]:
    """Number of changeset files waiting in `.changeset/` (README.md excluded)."""
    changeset_dir = workspace_root / CHANGESET_DIR
    if not changeset_dir.is_dir():
        return Ok(0)
    try:
        count = sum(
            1
            for p in changeset_dir.iterdir()
            if p.is_file() and p.suffix == ".md" and p.name.lower() != "readme.md"
        )
    except OSError as e:
        return Err(
            ReleaseError(
                kind="changeset_failed",
                message=f"failed to read {CHANGESET_DIR}: {e}",
                hint=str(changeset_dir),
            )
        )
    return Ok(count)


def _run_changeset(
    *, workspace_root: Path, command: Sequence[str], subcommand: str
) -> Result[str, ReleaseError]:
    result = run_process([*command, subcommand], cwd=workspace_root)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="changeset_failed",
                message=f"{' '.join(command)} {subcommand} failed (exit {e.returncode})",
                hint=e.stderr.strip() or e.stdout.strip() or None,
            )
        )
    return result


def changeset_status(*, workspace_root: Path, command: Sequence[str]) -> Result[str, ReleaseError]:
    return _run_changeset(workspace_root=workspace_root, command=command, subcommand="status")


def changeset_version(
    *, workspace_root: Path, command: Sequence[str]
) -> Result[str, ReleaseError]:
    """Apply pending changesets: bump manifests and write changelogs."""
    return _run_changeset(workspace_root=workspace_root, command=command, subcommand="version")


def changeset_tag(*, workspace_root: Path, command: Sequence[str]) -> Result[str, ReleaseError]:
    """Create git tags for newly versioned packages; stdout lists them."""
    return _run_changeset(workspace_root=workspace_root, command=command, subcommand="tag")
