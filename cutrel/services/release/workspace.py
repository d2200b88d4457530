from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from cutrel.core.result import Err, Ok, Result
from cutrel.core.structured import as_obj_list, as_str_dict, get_str
from cutrel.platform.process import run as run_process
from cutrel.services.release.errors import ReleaseError
from cutrel.services.release.model import Package, PackageRegistry, WorkspaceLayout


def detect_layout(workspace_root: Path) -> Result[WorkspaceLayout, ReleaseError]:
    """A repo is a multi-package workspace if pnpm or package.json declares one."""
    if (workspace_root / "pnpm-workspace.yaml").exists():
        return Ok("workspace")

    manifest = workspace_root / "package.json"
    try:
        obj: object = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(
            ReleaseError(
                kind="workspace_failed",
                message="package.json not found at workspace root",
                hint=str(manifest),
            )
        )
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return Err(
            ReleaseError(
                kind="workspace_failed",
                message=f"failed to read package.json: {e}",
                hint=str(manifest),
            )
        )

    data = as_str_dict(obj)
    if data is not None and "workspaces" in data:
        return Ok("workspace")
    return Ok("root")


def _parse_package_list(
    payload: str, *, workspace_root: Path, layout: WorkspaceLayout
) -> Result[tuple[Package, ...], ReleaseError]:
    try:
        obj: object = json.loads(payload)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(kind="workspace_failed", message=f"invalid JSON from pnpm ls: {e}")
        )

    raw = as_obj_list(obj)
    if raw is None:
        return Err(ReleaseError(kind="workspace_failed", message="unexpected pnpm ls payload"))

    root = workspace_root.resolve()
    out: list[Package] = []
    for item in raw:
        d = as_str_dict(item)
        if d is None:
            continue

        name = get_str(d, "name")
        version = get_str(d, "version")
        path = get_str(d, "path")
        if name is None or version is None or path is None:
            continue

        pkg_dir = Path(path).resolve()
        is_root = pkg_dir == root
        # A monorepo root is never released; a single-package repo is only its root.
        if (layout == "workspace") == is_root:
            continue
        out.append(Package(name=name, version=version, dir=pkg_dir))

    return Ok(tuple(out))


def list_packages(
    *, workspace_root: Path, command: Sequence[str]
) -> Result[PackageRegistry, ReleaseError]:
    """Read the workspace's packages (name, version, directory) and its layout."""
    layout = detect_layout(workspace_root)
    if isinstance(layout, Err):
        return layout

    result = run_process(list(command), cwd=workspace_root)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="workspace_failed",
                message="failed to list workspace packages",
                hint=e.stderr.strip() or None,
            )
        )

    packages = _parse_package_list(result.value, workspace_root=workspace_root, layout=layout.value)
    if isinstance(packages, Err):
        return packages
    return Ok(PackageRegistry(packages=packages.value, layout=layout.value))
