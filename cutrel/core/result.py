"""Result type for explicit error handling.

Every fallible operation in cutrel (running git, reading a changelog,
classifying tag output, publishing a release) returns a Result instead of
raising. Callers branch on the variant and decide what is fatal.

Usage:
    def read_version(path: Path) -> Result[str, ReleaseError]:
        if not path.is_file():
            return Err(ReleaseError(kind="invalid_input", message="no package.json"))
        return Ok("1.2.0")

    match read_version(path):
        case Ok(version):
            print(f"Version: {version}")
        case Err(error):
            print(f"Error: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result containing a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result containing an error."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
