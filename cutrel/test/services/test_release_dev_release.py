from __future__ import annotations

from pathlib import Path

import pytest

from cutrel.core.config import Config
from cutrel.core.result import Err, Ok, Result
from cutrel.git.repository import GitError
from cutrel.output.console import MockConsole
from cutrel.services.release import dev_release as dev_release_mod
from cutrel.services.release.dev_release import (
    DevRelease,
    create_dev_release,
    dev_tag_name,
    select_package,
)
from cutrel.services.release.errors import ReleaseError
from cutrel.services.release.model import Package, PackageRegistry

SHA = "4f2a9c1e0b7d"

SOLO = Package(name="solo", version="1.4.0", dir=Path("/ws"))
PKG_A = Package(name="@acme/a", version="1.1.0", dir=Path("/ws/packages/a"))
PKG_B = Package(name="b", version="0.2.0", dir=Path("/ws/packages/b"))


class FakeRepo:
    def __init__(
        self,
        *,
        on_remote: bool = False,
        local: bool = False,
        remote: str | None = "upstream",
        push_error: str | None = None,
    ) -> None:
        self.on_remote = on_remote
        self.local = local
        self.remote = remote
        self.push_error = push_error
        self.calls: list[tuple[str, ...]] = []

    def head_sha(self) -> Result[str, GitError]:
        return Ok(SHA)

    def current_branch(self) -> str | None:
        return "main"

    def remote_for_branch(self, branch: str) -> str | None:
        del branch
        return self.remote

    def remote_tag_exists(self, remote: str, tag: str) -> Result[bool, GitError]:
        self.calls.append(("ls-remote", remote, tag))
        return Ok(self.on_remote)

    def local_tag_exists(self, tag: str) -> Result[bool, GitError]:
        self.calls.append(("tag -l", tag))
        return Ok(self.local)

    def create_annotated_tag(self, tag: str, message: str) -> Result[str, GitError]:
        self.calls.append(("tag", tag, message))
        return Ok("")

    def push_tag(self, remote: str, tag: str) -> Result[str, GitError]:
        self.calls.append(("push", remote, tag))
        if self.push_error is not None:
            return Err(GitError(command="push", message=self.push_error))
        return Ok("")


def _registry(
    monkeypatch: pytest.MonkeyPatch, registry: PackageRegistry | ReleaseError
) -> None:
    def list_packages(
        *, workspace_root: Path, command: object
    ) -> Result[PackageRegistry, ReleaseError]:
        del workspace_root, command
        if isinstance(registry, ReleaseError):
            return Err(registry)
        return Ok(registry)

    monkeypatch.setattr(dev_release_mod, "list_packages", list_packages)


def _create(
    repo: FakeRepo,
    console: MockConsole,
    *,
    token: str | None = "t0ken",
    package_name: str | None = None,
) -> Result[DevRelease, ReleaseError]:
    return create_dev_release(
        workspace_root=Path("/ws"),
        config=Config(),
        console=console,
        token=token,
        package_name=package_name,
        repo=repo,  # type: ignore[arg-type]
    )


def test_dev_tag_name() -> None:
    assert dev_tag_name(PKG_A, SHA) == f"@acme/a@1.1.0-dev.{SHA}"


def test_creates_and_pushes_tag(monkeypatch: pytest.MonkeyPatch) -> None:
    _registry(monkeypatch, PackageRegistry(packages=(SOLO,), layout="root"))
    repo = FakeRepo()
    console = MockConsole()

    result = _create(repo, console)

    tag = f"solo@1.4.0-dev.{SHA}"
    assert result == Ok(DevRelease(tag=tag, remote="upstream"))
    assert repo.calls == [
        ("ls-remote", "upstream", tag),
        ("tag -l", tag),
        ("tag", tag, "dev-release"),
        ("push", "upstream", tag),
    ]
    assert console.has_success()


def test_falls_back_to_default_remote(monkeypatch: pytest.MonkeyPatch) -> None:
    _registry(monkeypatch, PackageRegistry(packages=(SOLO,), layout="root"))
    repo = FakeRepo(remote=None)

    result = _create(repo, MockConsole())
    assert isinstance(result, Ok)
    assert result.value.remote == "origin"


def test_tag_already_on_remote_is_a_noop(monkeypatch: pytest.MonkeyPatch) -> None:
    _registry(monkeypatch, PackageRegistry(packages=(SOLO,), layout="root"))
    repo = FakeRepo(on_remote=True)
    console = MockConsole()

    result = _create(repo, console)

    assert isinstance(result, Ok)
    assert result.value.already_released is True
    assert [c[0] for c in repo.calls] == ["ls-remote"]
    assert console.find("already been created")


def test_local_only_tag_is_pushed_not_recreated(monkeypatch: pytest.MonkeyPatch) -> None:
    _registry(monkeypatch, PackageRegistry(packages=(SOLO,), layout="root"))
    repo = FakeRepo(local=True)

    result = _create(repo, MockConsole())

    assert isinstance(result, Ok)
    assert [c[0] for c in repo.calls] == ["ls-remote", "tag -l", "push"]


def test_missing_token(monkeypatch: pytest.MonkeyPatch) -> None:
    _registry(monkeypatch, PackageRegistry(packages=(SOLO,), layout="root"))
    repo = FakeRepo()

    result = _create(repo, MockConsole(), token=None)

    assert isinstance(result, Err)
    assert result.error.kind == "missing_credential"
    assert repo.calls == []


def test_push_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _registry(monkeypatch, PackageRegistry(packages=(SOLO,), layout="root"))
    repo = FakeRepo(push_error="remote: Permission denied")

    result = _create(repo, MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "git_failed"
    assert result.error.hint == "remote: Permission denied"


def test_workspace_package_by_name(monkeypatch: pytest.MonkeyPatch) -> None:
    _registry(monkeypatch, PackageRegistry(packages=(PKG_A, PKG_B), layout="workspace"))

    result = _create(FakeRepo(), MockConsole(), package_name="b")

    assert isinstance(result, Ok)
    assert result.value.tag == f"b@0.2.0-dev.{SHA}"


def test_registry_error_propagates(monkeypatch: pytest.MonkeyPatch) -> None:
    _registry(monkeypatch, ReleaseError(kind="workspace_failed", message="pnpm ls failed"))

    result = _create(FakeRepo(), MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "workspace_failed"


class TestSelectPackage:
    def test_by_name(self) -> None:
        registry = PackageRegistry(packages=(PKG_A, PKG_B), layout="workspace")
        assert select_package(registry, "@acme/a") == Ok(PKG_A)

    def test_unknown_name(self) -> None:
        registry = PackageRegistry(packages=(PKG_A,), layout="workspace")
        result = select_package(registry, "ghost")
        assert isinstance(result, Err)
        assert result.error.kind == "unknown_package"

    def test_single_package_needs_no_name(self) -> None:
        registry = PackageRegistry(packages=(SOLO,), layout="root")
        assert select_package(registry, None) == Ok(SOLO)

    def test_several_packages_need_a_name(self) -> None:
        registry = PackageRegistry(packages=(PKG_A, PKG_B), layout="workspace")
        result = select_package(registry, None)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_input"
        assert result.error.hint == "@acme/a, b"

    def test_empty_registry(self) -> None:
        registry = PackageRegistry(packages=(), layout="root")
        result = select_package(registry, None)
        assert isinstance(result, Err)
        assert result.error.kind == "empty_registry"
