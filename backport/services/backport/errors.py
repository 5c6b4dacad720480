"""Error types for the backport workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PreflightErrorKind = Literal[
    "missing_argument",
    "not_a_file",
    "unknown_release",
    "branch_unavailable",
    "gh_missing",
]

ReleaseErrorKind = Literal[
    "branch_exists",
    "checkout_failed",
    "rebase_conflict",
    "rebase_skipped",
    "push_failed",
    "pr_failed",
]


@dataclass(frozen=True, slots=True)
class BackportError:
    """Canonical error payload.

    Pre-flight kinds abort the whole run; release kinds end a single
    release's workflow with an ERROR outcome.
    """

    kind: PreflightErrorKind | ReleaseErrorKind
    message: str
    hint: str | None = None

    @property
    def is_user_skip(self) -> bool:
        """True when the operator chose to skip, as opposed to a tool failure."""
        return self.kind == "rebase_skipped"
