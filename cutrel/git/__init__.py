"""Git operations module.

This module provides abstractions for git operations:
- Repository: single repository operations used by a release
- parse_remote_url: remote URL to forge identity

Usage:
    from cutrel.git import Repository, parse_remote_url

    repo = Repository(Path("/path/to/repo"))
    match repo.remote_url("origin"):
        case Ok(url):
            identity = parse_remote_url(url)
        case Err(e):
            print(e.message)
"""

from cutrel.git.remote import RemoteUrlError, RepositoryIdentity, parse_remote_url
from cutrel.git.repository import GitError, Repository

__all__ = [
    # Repository
    "GitError",
    "Repository",
    # Remote
    "RemoteUrlError",
    "RepositoryIdentity",
    "parse_remote_url",
]
