"""Error codes for CLI exit status.

A release run either finishes (or is stopped by the operator at a
non-publishing gate) and exits 0, or it stops on something the operator has
to look at and exits 1. Declining to publish counts as the latter: the
versions are committed, tagged and pushed but nothing reached the forge.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable.
    """

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower()
