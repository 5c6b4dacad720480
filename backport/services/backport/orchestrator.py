from __future__ import annotations

from backport.core.result import Err
from backport.output.console import ConsoleProtocol, Style
from backport.services.backport.context import BackportRun
from backport.services.backport.model import BatchReport, ReleaseOutcome, ReleaseReport
from backport.services.backport.workflow import ReleaseWorkflow


def run_backport(run: BackportRun) -> BatchReport:
    """Backport to every release in order, then return to the source branch.

    A failing release is reported and the loop moves on; the batch itself
    never fails.
    """
    config = run.config
    console = run.console
    workflow = ReleaseWorkflow(run)
    batch = BatchReport()

    for release in config.releases:
        console.newline()
        console.step(f"Attempting to patch {release} ...")
        report = workflow.run(release)
        batch.add(report)
        style = Style.SUCCESS if report.outcome == ReleaseOutcome.SUCCESS else Style.ERROR
        console.step(f"{release}: {report.outcome}", style)

    restored = run.repo.checkout(config.branch)
    if isinstance(restored, Err):
        console.warning(f"could not check out {config.branch}: {restored.error.message}")

    return batch


def print_summary(batch: BatchReport, console: ConsoleProtocol) -> None:
    console.header("Summary")
    if not batch.reports:
        console.print("no releases listed", Style.DIM)
        return

    width = max(len(r.release) for r in batch.reports)
    for report in batch.reports:
        row = f"{report.release:<{width}}  {report.outcome:<7}  {report.detail()}"
        console.print(row, _row_style(report))
        if report.recovery_script is not None:
            console.print(f"{'':<{width}}  resume with: bash {report.recovery_script}", Style.DIM)

    console.print(
        f"{len(batch.succeeded)} succeeded, {len(batch.failed)} failed",
        Style.BOLD,
    )


def _row_style(report: ReleaseReport) -> Style:
    if report.ok:
        return Style.SUCCESS
    if report.error is not None and report.error.is_user_skip:
        return Style.WARNING
    return Style.ERROR
