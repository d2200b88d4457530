from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "missing_credential",
    "dirty_worktree",
    "no_changesets",
    "git_failed",
    "changeset_failed",
    "workspace_failed",
    "invalid_remote",
    "unknown_package",
    "empty_registry",
    "changelog_unreadable",
    "missing_changelog_entry",
    "publish_failed",
    "invalid_input",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
