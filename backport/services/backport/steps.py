"""Minimal step runner for the per-release state machine.

Each handler takes the current (immutable) session and either advances to a
new session, finishes with a final session, or fails with a BackportError.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from backport.core.result import Err, Ok, Result
from backport.services.backport.errors import BackportError

S = TypeVar("S")
K = TypeVar("K")


@dataclass(frozen=True, slots=True)
class StepAdvance[S]:
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish[S]:
    session: S


type StepOutcome[S] = StepAdvance[S] | StepFinish[S]
type StepHandler[S] = Callable[[S], Result[StepOutcome[S], BackportError]]


def advance[S](session: S) -> Ok[StepOutcome[S]]:
    return Ok(StepAdvance(session=session))


def finish[S](session: S) -> Ok[StepOutcome[S]]:
    return Ok(StepFinish(session=session))


def run_steps[S, K](
    *,
    initial: S,
    get_step: Callable[[S], K],
    handlers: Mapping[K, StepHandler[S]],
    on_step: Callable[[K, S], None] | None = None,
) -> Result[S, BackportError]:
    """Drive ``initial`` through ``handlers`` until a step finishes or fails."""
    current = initial

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            raise ValueError(f"no handler for step: {step}")

        if on_step is not None:
            on_step(step, current)

        outcome = handler(current)
        if isinstance(outcome, Err):
            return outcome

        if isinstance(outcome.value, StepFinish):
            return Ok(outcome.value.session)

        current = outcome.value.session
