"""Error presentation utilities.

Centralized formatting and exit code mapping for fatal (pre-flight) errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from backport.core.errors import ErrorCode
from backport.output.console import Style
from backport.services.backport.errors import BackportError

if TYPE_CHECKING:
    from backport.output.console import ConsoleProtocol

__all__ = ["print_backport_error", "backport_error_exit_code"]

_ENV_KINDS = frozenset({"gh_missing"})


def print_backport_error(error: BackportError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def backport_error_exit_code(error: BackportError) -> int:
    if error.kind in _ENV_KINDS:
        return int(ErrorCode.ENV_ERROR)
    return int(ErrorCode.USER_ERROR)
