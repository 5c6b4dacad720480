"""Conflict handling after a failed rebase.

On entry a rebase is stopped on conflicts. On exit the rebase has either
completed (Ok) or been aborted (Err): an ERROR never leaves a rebase in
progress for the next release to trip over.
"""

from __future__ import annotations

from enum import StrEnum

from backport.core.result import Err, Ok, Result
from backport.git.repository import GitError
from backport.output.console import Style
from backport.services.backport.context import BackportRun
from backport.services.backport.decisions import MenuOption
from backport.services.backport.errors import BackportError

CONFLICT_PROMPT = "Conflicts during rebase. How to proceed?"
CONTINUE_PROMPT = "Press ENTER to continue"


class ConflictAction(StrEnum):
    PREFER_INCOMING = "theirs"
    PREFER_LOCAL = "ours"
    MANUAL = "manual"
    SKIP = "skip"


CONFLICT_MENU: tuple[MenuOption[ConflictAction], ...] = (
    MenuOption("1", ConflictAction.PREFER_INCOMING, "Retry using -X theirs"),
    MenuOption("2", ConflictAction.PREFER_LOCAL, "Retry using -X ours"),
    MenuOption("3", ConflictAction.MANUAL, "Resolve manually"),
    MenuOption("4", ConflictAction.SKIP, "Skip"),
)


def resolve_conflicts(run: BackportRun, release: str) -> Result[None, BackportError]:
    """Ask the operator how to get past the conflicts and carry it out."""
    choice = run.decisions.choose(CONFLICT_PROMPT, CONFLICT_MENU)

    match choice:
        case ConflictAction.PREFER_INCOMING:
            return _retry_with_strategy(run, release, "theirs")
        case ConflictAction.PREFER_LOCAL:
            return _retry_with_strategy(run, release, "ours")
        case ConflictAction.MANUAL:
            run.console.step("Resolve conflicts and run 'git rebase --continue'")
            run.decisions.pause(CONTINUE_PROMPT)
            return _require_finished(run, release)
        case ConflictAction.SKIP:
            run.console.step("Skipping")
            return _skip(run, release, "Skipped by operator")
        case None:
            run.console.step("Invalid choice, skipping", Style.WARNING)
            return _skip(run, release, "Invalid conflict menu choice")


def _retry_with_strategy(
    run: BackportRun, release: str, strategy_option: str
) -> Result[None, BackportError]:
    aborted = _abort(run, release)
    if isinstance(aborted, Err):
        return aborted

    config = run.config
    patch_branch = config.patch_branch(release)
    retried = run.repo.rebase_onto(
        onto=config.upstream_ref(release),
        upstream=config.base,
        branch=patch_branch,
        strategy_option=strategy_option,
    )
    if isinstance(retried, Ok):
        return Ok(None)

    if strategy_option == "ours" and run.repo.rebase_in_progress():
        continued = _drop_deleted_files(run)
        if isinstance(continued, Ok):
            return Ok(None)
        return _manual_fallback(run, release, continued.error)

    return _manual_fallback(run, release, retried.error)


def _drop_deleted_files(run: BackportRun) -> Result[str, GitError]:
    """Remove files one side deleted and continue the rebase."""
    run.console.step("Attempting to fix by removing missing files...")
    unmerged = run.repo.unmerged_entries()
    if isinstance(unmerged, Err):
        return unmerged

    deleted = [e for e in unmerged.value if e.is_deleted_by_us or e.is_deleted_by_them]
    for entry in deleted:
        run.console.print(f"  {entry.pretty_xy()} {entry.path}", Style.DIM)
    paths = [e.path for e in deleted]
    removed = run.repo.remove(paths)
    if isinstance(removed, Err):
        return removed
    return run.repo.rebase_continue()


def _manual_fallback(
    run: BackportRun, release: str, error: GitError
) -> Result[None, BackportError]:
    if not run.repo.rebase_in_progress():
        return Err(
            BackportError(
                kind="rebase_conflict",
                message=f"Rebase onto {run.config.upstream_ref(release)} failed",
                hint=error.message,
            )
        )
    run.console.step("Still failing, fix manually", Style.WARNING)
    run.decisions.pause(CONTINUE_PROMPT)
    return _require_finished(run, release)


def _require_finished(run: BackportRun, release: str) -> Result[None, BackportError]:
    if not run.repo.rebase_in_progress():
        return Ok(None)

    run.console.step("Rebase still in progress, aborting it", Style.WARNING)
    aborted = _abort(run, release)
    if isinstance(aborted, Err):
        return aborted
    return Err(
        BackportError(
            kind="rebase_conflict",
            message=f"Unresolved conflicts rebasing onto {run.config.upstream_ref(release)}",
        )
    )


def _skip(run: BackportRun, release: str, message: str) -> Result[None, BackportError]:
    aborted = _abort(run, release)
    if isinstance(aborted, Err):
        return aborted
    return Err(BackportError(kind="rebase_skipped", message=message))


def _abort(run: BackportRun, release: str) -> Result[None, BackportError]:
    if not run.repo.rebase_in_progress():
        return Ok(None)
    aborted = run.repo.rebase_abort()
    if isinstance(aborted, Err):
        return Err(
            BackportError(
                kind="rebase_conflict",
                message=f"Could not abort the rebase for {release}",
                hint=aborted.error.message,
            )
        )
    return Ok(None)
