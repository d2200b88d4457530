from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from cutrel.core.result import Err, Result
from cutrel.services.release.errors import ReleaseError

S = TypeVar("S")
O = TypeVar("O")


@dataclass(frozen=True, slots=True)
class StepAdvance[S]:
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish[O]:
    outcome: O


StepOutcome = StepAdvance[S] | StepFinish[O]
StepHandler = Callable[[S], Result[StepOutcome[S, O], ReleaseError]]
GetStep = Callable[[S], str]
OnError = Callable[[S, ReleaseError], O]


def advance[S](session: S) -> StepAdvance[S]:
    return StepAdvance(session=session)


def finish[O](outcome: O) -> StepFinish[O]:
    return StepFinish(outcome=outcome)


def run_state_machine(
    *,
    initial_state: S,
    get_step: GetStep[S],
    handlers: Mapping[str, StepHandler[S, O]],
    on_error: OnError[S, O],
) -> O:
    """Run step handlers until one finishes.

    A handler error ends the run through *on_error*, which receives the
    session as it was when the failing step started.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            return on_error(
                current,
                ReleaseError(kind="invalid_input", message=f"unknown release step: {step}"),
            )

        outcome = handler(current)
        if isinstance(outcome, Err):
            return on_error(current, outcome.error)

        if isinstance(outcome.value, StepFinish):
            return outcome.value.outcome

        current = outcome.value.session
