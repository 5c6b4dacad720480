from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from backport.core.result import Err, Ok, Result
from backport.platform.process import run as run_process
from backport.services.backport.errors import BackportError
from backport.services.backport.model import RunConfig

GH_TIMEOUT_SECONDS = 2 * 60.0


@dataclass(frozen=True, slots=True)
class DraftPullRequest:
    """Arguments of one ``gh pr create --draft`` call."""

    base: str
    title: str
    body: str | None = None
    body_file: Path | None = None
    repo: str | None = None

    def command(self) -> list[str]:
        cmd = ["gh", "pr", "create", "--base", self.base, "--title", self.title, "--draft"]
        if self.body_file is not None:
            cmd += ["--body-file", str(self.body_file)]
        else:
            cmd += ["--body", self.body or ""]
        if self.repo is not None:
            cmd += ["--repo", self.repo]
        return cmd


def pr_request_for(config: RunConfig, release: str) -> DraftPullRequest:
    """Draft PR for ``release``; previews never carry the real body."""
    title = config.pr_title(release)
    if config.preview_fork is not None:
        return DraftPullRequest(
            base=release,
            title=title,
            body=config.preview_body,
            repo=config.preview_fork,
        )
    return DraftPullRequest(base=release, title=title, body_file=config.body_file)


def ensure_gh_available() -> Result[None, BackportError]:
    if shutil.which("gh") is None:
        return Err(
            BackportError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/ (or use --local-only)",
            )
        )
    return Ok(None)


def create_draft_pr(*, repo_root: Path, request: DraftPullRequest) -> Result[str, BackportError]:
    """Open the draft PR and return the URL printed by gh."""
    result = run_process(request.command(), cwd=repo_root, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            BackportError(
                kind="pr_failed",
                message=f"Failed to open PR for {request.base}",
                hint=result.error.output or None,
            )
        )

    lines = [ln.strip() for ln in result.value.splitlines() if ln.strip()]
    urls = [ln for ln in lines if ln.startswith("https://")]
    return Ok(urls[-1] if urls else (lines[-1] if lines else ""))
