"""Interactive decisions taken during a backport run.

The workflow never reads from the terminal itself. It asks a Decisions
provider, which is backed by typer prompts on a terminal
(``backport.cli.prompts.TerminalDecisions``) or by a list of canned answers
in tests (ScriptedDecisions).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

T = TypeVar("T")

__all__ = [
    "Decisions",
    "MenuOption",
    "ScriptedDecisions",
    "pick_option",
]


@dataclass(frozen=True, slots=True)
class MenuOption[T]:
    """One numbered entry of a menu."""

    key: str
    value: T
    label: str


def pick_option[T](options: Sequence[MenuOption[T]], raw: str) -> T | None:
    """Return the value whose key matches ``raw``, or None for invalid input."""
    typed = raw.strip()
    for option in options:
        if option.key == typed:
            return option.value
    return None


class Decisions(Protocol):
    def choose(self, prompt: str, options: Sequence[MenuOption[T]]) -> T | None:
        """Present a menu and return the selected value (None if invalid)."""
        ...

    def ask(self, prompt: str) -> str:
        """Read one line of free text (empty string on plain Enter)."""
        ...

    def pause(self, prompt: str) -> None:
        """Block until the operator acknowledges ``prompt``."""
        ...


def _empty_answers() -> list[str]:
    return []


@dataclass
class ScriptedDecisions:
    """Decisions provider that replays canned answers.

    Every prompt is recorded in ``prompts``; running out of answers is a test
    bug and raises RuntimeError.
    """

    answers: list[str] = field(default_factory=_empty_answers)
    prompts: list[str] = field(default_factory=_empty_answers)

    def choose(self, prompt: str, options: Sequence[MenuOption[T]]) -> T | None:
        return pick_option(options, self._next(prompt))

    def ask(self, prompt: str) -> str:
        return self._next(prompt)

    def pause(self, prompt: str) -> None:
        self._next(prompt)

    def _next(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise RuntimeError(f"no scripted answer left for: {prompt}")
        return self.answers.pop(0)
