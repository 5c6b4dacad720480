from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from backport.core.config import (
    DEFAULT_BASE_BRANCH,
    DEFAULT_PREVIEW_BODY,
    DEFAULT_PUSH_REMOTE,
    DEFAULT_TITLE_TEMPLATE,
    DEFAULT_UPSTREAM_REMOTE,
)
from backport.core.result import Err, Ok, Result
from backport.services.backport.errors import BackportError

type ReleaseList = tuple[str, ...]


def patch_branch_name(branch: str, release: str) -> str:
    return f"{branch}-{release}-patch"


def parse_release_list(text: str) -> ReleaseList:
    """One release per line, in file order.

    Blank lines and ``#`` comments are ignored; duplicates are kept.
    """
    releases: list[str] = []
    for line in text.splitlines():
        name = line.strip()
        if not name or name.startswith("#"):
            continue
        releases.append(name)
    return tuple(releases)


def read_release_list(path: Path) -> Result[ReleaseList, BackportError]:
    if not path.is_file():
        return Err(BackportError(kind="not_a_file", message=f"Not a file: {path}"))
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            BackportError(kind="not_a_file", message=f"Cannot read release list: {path}", hint=str(e))
        )
    return Ok(parse_release_list(text))


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Everything one invocation needs, resolved before any git mutation."""

    branch: str
    releases: ReleaseList
    title: str
    body_file: Path
    base: str = DEFAULT_BASE_BRANCH
    upstream: str = DEFAULT_UPSTREAM_REMOTE
    remote: str = DEFAULT_PUSH_REMOTE
    title_template: str = DEFAULT_TITLE_TEMPLATE
    preview_fork: str | None = None
    preview_body: str = DEFAULT_PREVIEW_BODY
    local_only: bool = False
    continue_existing: bool = False
    recovery_dir: Path = Path(".")

    def patch_branch(self, release: str) -> str:
        return patch_branch_name(self.branch, release)

    def pr_title(self, release: str) -> str:
        return self.title_template.format(title=self.title, release=release)

    def upstream_ref(self, release: str) -> str:
        return f"{self.upstream}/{release}"


class ReleaseOutcome(StrEnum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    release: str
    outcome: ReleaseOutcome
    error: BackportError | None = None
    pr_url: str | None = None
    publish_skipped: bool = False
    recovery_script: Path | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == ReleaseOutcome.SUCCESS

    def detail(self) -> str:
        if self.error is not None:
            return self.error.message
        if self.pr_url:
            return self.pr_url
        if self.publish_skipped:
            return "publish skipped"
        return "local only"


def _empty_reports() -> list[ReleaseReport]:
    return []


@dataclass
class BatchReport:
    """Per-release reports in input order; kept in memory only."""

    reports: list[ReleaseReport] = field(default_factory=_empty_reports)

    def add(self, report: ReleaseReport) -> None:
        self.reports.append(report)

    @property
    def succeeded(self) -> list[ReleaseReport]:
        return [r for r in self.reports if r.ok]

    @property
    def failed(self) -> list[ReleaseReport]:
        return [r for r in self.reports if not r.ok]

    def outcome_of(self, release: str) -> ReleaseOutcome | None:
        """Outcome of the last report for ``release`` (lists may repeat)."""
        for report in reversed(self.reports):
            if report.release == release:
                return report.outcome
        return None
