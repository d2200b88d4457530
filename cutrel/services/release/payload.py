from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from cutrel.core.result import Err, Ok, Result
from cutrel.git.remote import RepositoryIdentity
from cutrel.services.release.changelog import get_changelog_entry
from cutrel.services.release.errors import ReleaseError
from cutrel.services.release.model import Package, ReleaseRequest

# Ok(None) means the file does not exist.
ChangelogReader = Callable[[Path], Result[str | None, ReleaseError]]


def read_changelog_file(path: Path) -> Result[str | None, ReleaseError]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Ok(None)
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="changelog_unreadable",
                message=f"failed to read changelog: {e}",
                hint=str(path),
            )
        )


def build_release_request(
    *,
    package: Package,
    tag_name: str,
    identity: RepositoryIdentity,
    read_changelog: ChangelogReader = read_changelog_file,
    changelog_filename: str = "CHANGELOG.md",
) -> Result[ReleaseRequest | None, ReleaseError]:
    """Release request for one tagged package.

    Returns Ok(None) when the package has no changelog file: changelogs are
    optional and such packages are simply not published. A changelog that
    exists but has no section for the package's version means the tag and
    the notes disagree, which is an error.
    """
    text = read_changelog(package.dir / changelog_filename)
    if isinstance(text, Err):
        return text
    if text.value is None:
        return Ok(None)

    entry = get_changelog_entry(text.value, package.version)
    if not entry.found:
        return Err(
            ReleaseError(
                kind="missing_changelog_entry",
                message=f"Could not find changelog entry for {package.name}@{package.version}",
                hint=str(package.dir / changelog_filename),
            )
        )

    return Ok(
        ReleaseRequest(
            owner=identity.owner,
            repo=identity.project,
            tag_name=tag_name,
            title=tag_name,
            body=entry.body,
            prerelease=package.is_prerelease,
        )
    )
