"""Yes/no confirmation abstraction.

The release pipeline asks before every irreversible step. Asking goes through
PromptProtocol so the pipeline can be driven by scripted answers in tests
instead of a real terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

__all__ = ["PromptProtocol", "ScriptedPrompt", "TyperPrompt"]


class PromptProtocol(Protocol):
    """Protocol for blocking yes/no questions."""

    def confirm(self, question: str, *, default: bool) -> bool:
        """Ask *question*; an empty answer means *default*."""
        ...


class TyperPrompt:
    """Prompt implementation reading from the terminal via typer."""

    def confirm(self, question: str, *, default: bool) -> bool:
        import typer

        return typer.confirm(question, default=default)


@dataclass(frozen=True, slots=True)
class AskedQuestion:
    question: str
    default: bool


def _empty_answers() -> list[bool | None]:
    return []


def _empty_asked() -> list[AskedQuestion]:
    return []


@dataclass
class ScriptedPrompt:
    """Prompt implementation that replays canned answers for testing.

    None in *answers* stands for "pressed enter" and yields the question's
    default. Running out of answers is a test bug and raises AssertionError.
    """

    answers: list[bool | None] = field(default_factory=_empty_answers)
    asked: list[AskedQuestion] = field(default_factory=_empty_asked)

    def confirm(self, question: str, *, default: bool) -> bool:
        self.asked.append(AskedQuestion(question=question, default=default))
        if not self.answers:
            raise AssertionError(f"unexpected question: {question}")
        answer = self.answers.pop(0)
        return default if answer is None else answer

    @property
    def questions(self) -> list[str]:
        return [a.question for a in self.asked]
