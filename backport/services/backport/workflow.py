"""Per-release backport workflow.

Steps, run in order for one release:

    start -> rebase -> [conflict] -> confirm -> push -> open_pr

``start`` jumps straight to ``confirm`` when resuming an existing patch
branch in continue mode. Any step may end the release with an error; none of
them undo side effects of earlier steps (a pushed branch stays pushed).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from backport.core.result import Err, Ok, Result
from backport.output.console import Style
from backport.services.backport.conflicts import resolve_conflicts
from backport.services.backport.context import BackportRun
from backport.services.backport.errors import BackportError
from backport.services.backport.gh import create_draft_pr, pr_request_for
from backport.services.backport.model import ReleaseOutcome, ReleaseReport
from backport.services.backport.recovery import write_recovery_script
from backport.services.backport.steps import StepHandler, StepOutcome, advance, finish, run_steps

PUBLISH_PROMPT = "Press Enter to push branch and open PR or type 'skip' to skip"
SKIP_ANSWER = "skip"

_RECOVERABLE_BY_HAND = {"rebase_conflict", "rebase_skipped"}


class ReleaseStep(StrEnum):
    START = "start"
    REBASE = "rebase"
    CONFLICT = "conflict"
    CONFIRM = "confirm"
    PUSH = "push"
    OPEN_PR = "open_pr"


@dataclass(frozen=True, slots=True)
class ReleaseSession:
    release: str
    patch_branch: str
    step: ReleaseStep = ReleaseStep.START
    pr_url: str | None = None
    publish_skipped: bool = False


class ReleaseWorkflow:
    """Runs the backport of the configured branch onto one release at a time."""

    def __init__(self, run: BackportRun) -> None:
        self._run = run
        self._handlers: dict[ReleaseStep, StepHandler[ReleaseSession]] = {
            ReleaseStep.START: self._start,
            ReleaseStep.REBASE: self._rebase,
            ReleaseStep.CONFLICT: self._conflict,
            ReleaseStep.CONFIRM: self._confirm,
            ReleaseStep.PUSH: self._push,
            ReleaseStep.OPEN_PR: self._open_pr,
        }

    def run(self, release: str) -> ReleaseReport:
        session = ReleaseSession(
            release=release,
            patch_branch=self._run.config.patch_branch(release),
        )
        result = run_steps(
            initial=session,
            get_step=lambda s: s.step,
            handlers=self._handlers,
        )

        match result:
            case Ok(final):
                return ReleaseReport(
                    release=release,
                    outcome=ReleaseOutcome.SUCCESS,
                    pr_url=final.pr_url,
                    publish_skipped=final.publish_skipped,
                )
            case Err(error):
                return self._failed(release, error)

    def _failed(self, release: str, error: BackportError) -> ReleaseReport:
        console = self._run.console
        if error.hint:
            console.print(error.hint, Style.DIM)

        script = None
        if error.kind in _RECOVERABLE_BY_HAND:
            written = write_recovery_script(self._run.config, release)
            if isinstance(written, Ok):
                script = written.value
                console.step(f"Recovery commands written to {script}", Style.DIM)
            else:
                console.warning(written.error)

        return ReleaseReport(
            release=release,
            outcome=ReleaseOutcome.ERROR,
            error=error,
            recovery_script=script,
        )

    # -- steps ----------------------------------------------------------------

    def _start(self, s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], BackportError]:
        config = self._run.config
        repo = self._run.repo

        checked_out = repo.checkout(config.branch)
        if isinstance(checked_out, Err):
            return Err(
                BackportError(
                    kind="checkout_failed",
                    message=f"Could not check out {config.branch}",
                    hint=checked_out.error.message,
                )
            )

        if isinstance(repo.create_branch(s.patch_branch), Ok):
            return advance(replace(s, step=ReleaseStep.REBASE))

        self._run.console.step(f"Assuming work on {s.release} is already done")
        if not config.continue_existing:
            self._run.console.step("Skipping")
            return Err(
                BackportError(
                    kind="branch_exists",
                    message=f"{s.patch_branch} already exists",
                    hint="Use --continue to publish existing patch branches",
                )
            )

        resumed = repo.checkout(s.patch_branch)
        if isinstance(resumed, Err):
            return Err(
                BackportError(
                    kind="checkout_failed",
                    message=f"Could not check out {s.patch_branch}",
                    hint=resumed.error.message,
                )
            )
        return advance(replace(s, step=ReleaseStep.CONFIRM))

    def _rebase(self, s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], BackportError]:
        config = self._run.config
        repo = self._run.repo

        rebased = repo.rebase_onto(
            onto=config.upstream_ref(s.release),
            upstream=config.base,
            branch=s.patch_branch,
        )
        if isinstance(rebased, Ok):
            return advance(replace(s, step=ReleaseStep.CONFIRM))

        if not repo.rebase_in_progress():
            return Err(
                BackportError(
                    kind="rebase_conflict",
                    message=f"Rebase onto {config.upstream_ref(s.release)} failed",
                    hint=rebased.error.message,
                )
            )

        for line in rebased.error.message.splitlines():
            self._run.console.print(line, Style.DIM)
        return advance(replace(s, step=ReleaseStep.CONFLICT))

    def _conflict(self, s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], BackportError]:
        resolved = resolve_conflicts(self._run, s.release)
        if isinstance(resolved, Err):
            return resolved
        return advance(replace(s, step=ReleaseStep.CONFIRM))

    def _confirm(self, s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], BackportError]:
        if self._run.config.local_only:
            return finish(s)

        self._run.console.step("Rebase complete. Take a look at the diff before pushing.")
        answer = self._run.decisions.ask(PUBLISH_PROMPT)
        if answer.strip() == SKIP_ANSWER:
            self._run.console.step(f"Not publishing {s.patch_branch}")
            return finish(replace(s, publish_skipped=True))
        return advance(replace(s, step=ReleaseStep.PUSH))

    def _push(self, s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], BackportError]:
        pushed = self._run.repo.push_upstream(self._run.config.remote, s.patch_branch)
        if isinstance(pushed, Err):
            self._run.console.step(f"Could not push {s.patch_branch}", Style.ERROR)
            return Err(
                BackportError(
                    kind="push_failed",
                    message=f"Could not push {s.patch_branch}",
                    hint=pushed.error.message,
                )
            )
        return advance(replace(s, step=ReleaseStep.OPEN_PR))

    def _open_pr(self, s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], BackportError]:
        request = pr_request_for(self._run.config, s.release)
        created = create_draft_pr(repo_root=self._run.repo.path, request=request)
        if isinstance(created, Err):
            self._run.console.step(created.error.message, Style.ERROR)
            return created
        self._run.console.step(f"Opened draft PR: {created.value}", Style.SUCCESS)
        return finish(replace(s, pr_url=created.value))
