from __future__ import annotations

from cutrel.core.result import Err, Ok, Result
from cutrel.git.remote import RepositoryIdentity, parse_remote_url
from cutrel.git.repository import Repository
from cutrel.services.release.errors import ReleaseError


def resolve_remote_name(repo: Repository, *, default_remote: str) -> str:
    """Remote tracked by the current branch, else *default_remote*."""
    branch = repo.current_branch()
    if branch is None:
        return default_remote
    return repo.remote_for_branch(branch) or default_remote


def resolve_repository(
    repo: Repository, *, default_remote: str
) -> Result[RepositoryIdentity, ReleaseError]:
    remote = resolve_remote_name(repo, default_remote=default_remote)
    url = repo.remote_url(remote)
    if isinstance(url, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"failed to read url of remote '{remote}'",
                hint=url.error.message,
            )
        )

    identity = parse_remote_url(url.value)
    if isinstance(identity, Err):
        return Err(
            ReleaseError(
                kind="invalid_remote",
                message=str(identity.error),
                hint=f"remote '{remote}'",
            )
        )
    return Ok(identity.value)
