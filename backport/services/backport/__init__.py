"""Backport one branch to a list of release branches.

Usage:
    from backport.services.backport import BackportRun, run_backport

    batch = run_backport(BackportRun(config=cfg, repo=repo, console=console, decisions=decisions))
    for report in batch.failed:
        print(report.release, report.detail())
"""

from backport.services.backport.context import BackportRun
from backport.services.backport.decisions import Decisions, MenuOption, ScriptedDecisions
from backport.services.backport.errors import BackportError
from backport.services.backport.model import (
    BatchReport,
    ReleaseOutcome,
    ReleaseReport,
    RunConfig,
)
from backport.services.backport.orchestrator import print_summary, run_backport
from backport.services.backport.preflight import RunRequest, build_run_config

__all__ = [
    "BackportError",
    "BackportRun",
    "BatchReport",
    "Decisions",
    "MenuOption",
    "ReleaseOutcome",
    "ReleaseReport",
    "RunConfig",
    "RunRequest",
    "ScriptedDecisions",
    "build_run_config",
    "print_summary",
    "run_backport",
]
