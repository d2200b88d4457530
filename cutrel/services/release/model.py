from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Literal


# "root": the workspace root is the only package (tags are v<version>).
# "workspace": a monorepo; the root is not released (tags are <name>@<version>).
WorkspaceLayout = Literal["root", "workspace"]


class BumpLevel(IntEnum):
    """Severity of a version change, ordered so max() picks the strongest."""

    DEP = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class Package:
    name: str
    version: str
    dir: Path

    @property
    def is_prerelease(self) -> bool:
        return "-" in self.version


@dataclass(frozen=True, slots=True)
class PackageRegistry:
    packages: tuple[Package, ...]
    layout: WorkspaceLayout

    def by_name(self, name: str) -> Package | None:
        for pkg in self.packages:
            if pkg.name == name:
                return pkg
        return None


@dataclass(frozen=True, slots=True)
class TaggedPackageRef:
    package: Package
    tag_name: str


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    """Everything the forge needs to create one release."""

    owner: str
    repo: str
    tag_name: str
    title: str
    body: str
    prerelease: bool


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    package: Package
    tag_name: str
    url: str
