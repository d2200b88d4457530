"""Tests for output/prompt.py."""

from __future__ import annotations

import pytest

from cutrel.output.prompt import AskedQuestion, ScriptedPrompt, TyperPrompt


def test_scripted_answers_in_order() -> None:
    prompt = ScriptedPrompt(answers=[True, False])
    assert prompt.confirm("Commit?", default=True) is True
    assert prompt.confirm("Create tags?", default=True) is False
    assert prompt.questions == ["Commit?", "Create tags?"]


def test_none_answer_takes_default() -> None:
    prompt = ScriptedPrompt(answers=[None, None])
    assert prompt.confirm("Push to git forge?", default=True) is True
    assert prompt.confirm("Release to GitHub?", default=False) is False
    assert prompt.asked == [
        AskedQuestion(question="Push to git forge?", default=True),
        AskedQuestion(question="Release to GitHub?", default=False),
    ]


def test_running_out_of_answers_fails_loudly() -> None:
    prompt = ScriptedPrompt()
    with pytest.raises(AssertionError, match="unexpected question: Commit"):
        prompt.confirm("Commit?", default=True)


def test_typer_prompt_delegates(monkeypatch: pytest.MonkeyPatch) -> None:
    import typer

    seen: list[tuple[str, bool]] = []

    def fake_confirm(text: str, default: bool = False) -> bool:
        seen.append((text, default))
        return True

    monkeypatch.setattr(typer, "confirm", fake_confirm)
    assert TyperPrompt().confirm("Commit?", default=True) is True
    assert seen == [("Commit?", True)]
