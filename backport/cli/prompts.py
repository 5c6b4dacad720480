from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

import typer

from backport.output.console import ConsoleProtocol
from backport.services.backport.decisions import MenuOption, pick_option

T = TypeVar("T")

SELECT_PROMPT = "Select an option"


class TerminalDecisions:
    """Decisions read from the terminal with typer prompts."""

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def choose(self, prompt: str, options: Sequence[MenuOption[T]]) -> T | None:
        self._console.step(prompt)
        for option in options:
            self._console.step(f"{option.key}) {option.label}")
        raw = typer.prompt(SELECT_PROMPT, default="", show_default=False)
        return pick_option(options, raw)

    def ask(self, prompt: str) -> str:
        return typer.prompt(prompt, default="", show_default=False)

    def pause(self, prompt: str) -> None:
        typer.prompt(prompt, default="", show_default=False, prompt_suffix=" ")
