"""Classify which packages `changeset tag` actually tagged.

`changeset tag` prints one line per tag it creates and a different line for
tags that already exist:

    🦋  New tag:  @scope/pkg-a@1.2.0
    🦋  New tag:  pkg-b@0.1.0
    🦋  Skipping tag pkg-c@2.0.0 because it already exists

In a single-package repository the tag carries no package name
("New tag:  v1.2.0"), so only the marker matters there.
"""

from __future__ import annotations

import re

from cutrel.core.result import Err, Ok, Result
from cutrel.services.release.errors import ReleaseError
from cutrel.services.release.model import PackageRegistry, TaggedPackageRef

_NEW_TAG_MARKER = "New tag:"
_NEW_TAG_RE = re.compile(r"New tag:\s+(\S+)")
_PACKAGE_NAME_RE = re.compile(r"^(?:@[^/@\s]+/[^/@\s]+|[^/@\s]+)$")


def split_tag_token(token: str) -> tuple[str, str] | None:
    """Split "name@version" on its last "@".

    "@scope/pkg@1.2.0" -> ("@scope/pkg", "1.2.0"). Returns None when there is
    no version part or the name is not a (possibly scoped) package name.
    """
    name, sep, version = token.rpartition("@")
    if not sep or not name or not version:
        return None
    if _PACKAGE_NAME_RE.match(name) is None:
        return None
    return (name, version)


def _classify_workspace(
    output: str, registry: PackageRegistry
) -> Result[list[TaggedPackageRef], ReleaseError]:
    refs: list[TaggedPackageRef] = []
    for line in output.splitlines():
        m = _NEW_TAG_RE.search(line)
        if m is None:
            continue
        token = m.group(1)
        parsed = split_tag_token(token)
        if parsed is None:
            return Err(
                ReleaseError(
                    kind="unknown_package",
                    message=f'Tag "{token}" does not name a package.',
                    hint="changeset tag printed a tag that is not <package>@<version>",
                )
            )

        name, _ = parsed
        pkg = registry.by_name(name)
        if pkg is None:
            return Err(
                ReleaseError(
                    kind="unknown_package",
                    message=f'Package "{name}" not found.',
                    hint="changeset tag reported a package missing from the workspace",
                )
            )
        refs.append(TaggedPackageRef(package=pkg, tag_name=f"{pkg.name}@{pkg.version}"))
    return Ok(refs)


def _classify_root(
    output: str, registry: PackageRegistry
) -> Result[list[TaggedPackageRef], ReleaseError]:
    if not registry.packages:
        return Err(
            ReleaseError(
                kind="empty_registry",
                message="No package found.",
                hint="the workspace root has no package.json the registry could read",
            )
        )

    pkg = registry.packages[0]
    for line in output.splitlines():
        if _NEW_TAG_MARKER in line:
            # Only one tag exists in this layout.
            return Ok([TaggedPackageRef(package=pkg, tag_name=f"v{pkg.version}")])
    return Ok([])


def determine_packages_to_release(
    tag_output: str, registry: PackageRegistry
) -> Result[list[TaggedPackageRef], ReleaseError]:
    """Packages newly tagged according to *tag_output*, in output order.

    An empty list means nothing was tagged in this run.
    """
    if registry.layout == "root":
        return _classify_root(tag_output, registry)
    return _classify_workspace(tag_output, registry)
