"""Git repository abstraction.

This module provides the Repository class with the git operations a release
needs. All operations return Result types; the captured stderr of a failed
command is carried verbatim in GitError.message so the operator sees exactly
what git said.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.has_uncommitted_changes():
        case Ok(True):
            print("Commit or stash first")
        case Ok(False):
            print("Working tree clean")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cutrel.core.result import Err, Ok, Result
from cutrel.platform.process import ProcessError
from cutrel.platform.process import run as run_process

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def _git_error(command: str, error: ProcessError) -> GitError:
    message = error.stderr.strip() or error.stdout.strip() or f"git {command} failed"
    return GitError(command=command, message=message, returncode=error.returncode)


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def has_uncommitted_changes(self) -> Result[bool, GitError]:
        """Report whether tracked files differ from HEAD.

        Runs `git diff HEAD --quiet`: exit 0 means clean, exit 1 means there
        are changes, anything else is a real failure.
        """
        result = self._run(["diff", "HEAD", "--quiet"])
        match result:
            case Ok(_):
                return Ok(False)
            case Err(e):
                if e.returncode == 1:
                    return Ok(True)
                return Err(_git_error("diff", e))

    def stage_all(self) -> Result[str, GitError]:
        return self._checked("add", ["add", ".", "--all"])

    def commit(self, message: str) -> Result[str, GitError]:
        return self._checked("commit", ["commit", "-m", message])

    def head_sha(self) -> Result[str, GitError]:
        """Full sha of the current commit."""
        return self._checked("rev-parse", ["rev-parse", "HEAD"])

    def create_annotated_tag(self, tag: str, message: str) -> Result[str, GitError]:
        return self._checked("tag", ["tag", "-a", tag, "-m", message])

    def push_follow_tags(self) -> Result[str, GitError]:
        """Push the current branch together with its annotated tags."""
        return self._checked("push", ["push", "--follow-tags"])

    def push_tag(self, remote: str, tag: str) -> Result[str, GitError]:
        return self._checked("push", ["push", remote, "tag", tag])

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch in {"", "HEAD"} else branch
            case Err(_):
                return None

    def remote_for_branch(self, branch: str) -> str | None:
        """Remote configured for *branch*, None if it has none."""
        result = self._run(["config", "--get", f"branch.{branch}.remote"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def remote_url(self, remote: str) -> Result[str, GitError]:
        return self._checked("remote get-url", ["remote", "get-url", remote])

    def local_tag_exists(self, tag: str) -> Result[bool, GitError]:
        result = self._checked("tag -l", ["tag", "-l", tag])
        if isinstance(result, Err):
            return result
        return Ok(bool(result.value))

    def remote_tag_exists(self, remote: str, tag: str) -> Result[bool, GitError]:
        result = self._checked("ls-remote", ["ls-remote", remote, f"refs/tags/{tag}"])
        if isinstance(result, Err):
            return result
        return Ok(bool(result.value))

    def _checked(self, command: str, args: list[str]) -> Result[str, GitError]:
        """Run git and return stripped stdout, or a GitError labelled *command*."""
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error(command, e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path)
