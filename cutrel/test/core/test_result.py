"""Tests for cutrel.core.result."""

from __future__ import annotations

import pytest

from cutrel.core.result import Err, Ok, Result


def test_repr() -> None:
    assert repr(Ok("a")) == "Ok('a')"
    assert repr(Err(3)) == "Err(3)"


def test_equality() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)


def test_frozen() -> None:
    with pytest.raises(AttributeError):
        Ok(1).value = 2  # type: ignore[misc]


def test_pattern_matching() -> None:
    def describe(result: Result[int, str]) -> str:
        match result:
            case Ok(value):
                return f"ok {value}"
            case Err(error):
                return f"err {error}"

    assert describe(Ok(3)) == "ok 3"
    assert describe(Err("no")) == "err no"
