"""Dev releases: tag the current commit as `<name>@<version>-dev.<sha>` and push it.

Safe to re-run. A tag already on the remote ends the run successfully, and a
tag that only exists locally is pushed without being recreated.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cutrel.core.config import Config
from cutrel.core.result import Err, Ok, Result
from cutrel.git.repository import GitError, Repository
from cutrel.output.console import ConsoleProtocol, Style
from cutrel.services.release.errors import ReleaseError
from cutrel.services.release.identity import resolve_remote_name
from cutrel.services.release.model import Package, PackageRegistry
from cutrel.services.release.workspace import list_packages


@dataclass(frozen=True, slots=True)
class DevRelease:
    tag: str
    remote: str
    already_released: bool = False


def dev_tag_name(package: Package, sha: str) -> str:
    return f"{package.name}@{package.version}-dev.{sha}"


def select_package(
    registry: PackageRegistry, package_name: str | None
) -> Result[Package, ReleaseError]:
    if package_name is not None:
        pkg = registry.by_name(package_name)
        if pkg is None:
            return Err(
                ReleaseError(kind="unknown_package", message=f'Package "{package_name}" not found.')
            )
        return Ok(pkg)

    if not registry.packages:
        return Err(ReleaseError(kind="empty_registry", message="No package found."))
    if len(registry.packages) > 1:
        names = ", ".join(p.name for p in registry.packages)
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="several packages in workspace: pass --package",
                hint=names,
            )
        )
    return Ok(registry.packages[0])


def _git_failed(what: str, error: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=f"{what} failed", hint=error.message)


def create_dev_release(
    *,
    workspace_root: Path,
    config: Config,
    console: ConsoleProtocol,
    token: str | None,
    package_name: str | None = None,
    repo: Repository | None = None,
) -> Result[DevRelease, ReleaseError]:
    if not token:
        return Err(
            ReleaseError(
                kind="missing_credential",
                message=f"Please provide the {config.token_env} environment variable",
            )
        )
    repo = repo or Repository(workspace_root)

    registry = list_packages(workspace_root=workspace_root, command=config.workspace_list_command)
    if isinstance(registry, Err):
        return registry
    pkg = select_package(registry.value, package_name)
    if isinstance(pkg, Err):
        return pkg

    sha = repo.head_sha()
    if isinstance(sha, Err):
        return Err(_git_failed("git rev-parse", sha.error))

    tag = dev_tag_name(pkg.value, sha.value)
    remote = resolve_remote_name(repo, default_remote=config.default_remote)

    on_remote = repo.remote_tag_exists(remote, tag)
    if isinstance(on_remote, Err):
        return Err(_git_failed("git ls-remote", on_remote.error))
    if on_remote.value:
        console.info(
            f"A dev release has already been created for the latest commit with tag {tag}"
        )
        return Ok(DevRelease(tag=tag, remote=remote, already_released=True))

    local = repo.local_tag_exists(tag)
    if isinstance(local, Err):
        return Err(_git_failed("git tag -l", local.error))
    if not local.value:
        created = repo.create_annotated_tag(tag, config.dev_tag_message)
        if isinstance(created, Err):
            return Err(_git_failed("git tag", created.error))
    else:
        console.print(f"tag {tag} exists locally, pushing it", Style.DIM)

    pushed = repo.push_tag(remote, tag)
    if isinstance(pushed, Err):
        return Err(_git_failed("git push", pushed.error))

    console.success(f"Successfully created and pushed a dev-release tag: {tag}")
    return Ok(DevRelease(tag=tag, remote=remote))
