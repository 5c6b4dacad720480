"""Validation that runs before any branch is created.

Every check here is fatal: the caller exits without touching the working
tree when one fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from backport.core.config import ProjectConfig
from backport.core.result import Err, Ok, Result
from backport.git.repository import Repository
from backport.services.backport.errors import BackportError
from backport.services.backport.gh import ensure_gh_available
from backport.services.backport.model import ReleaseList, RunConfig, read_release_list


@dataclass(frozen=True, slots=True)
class RunRequest:
    """Raw command-line input, before validation.

    ``None`` means "not given"; overrides fall back to the project config.
    """

    releases_file: Path | None
    body_file: Path | None
    title: str | None
    branch: str | None = None
    preview_fork: str | None = None
    base: str | None = None
    upstream: str | None = None
    remote: str | None = None
    local_only: bool = False
    continue_existing: bool = False


def _require_file(path: Path) -> Result[Path, BackportError]:
    if not path.is_file():
        return Err(BackportError(kind="not_a_file", message=f"Not a file: {path}"))
    return Ok(path.resolve())


def verify_releases(
    repo: Repository, *, upstream: str, releases: ReleaseList
) -> Result[None, BackportError]:
    """Every release needs a remote-tracking branch ``<upstream>/<release>``."""
    for release in releases:
        if not repo.has_remote_branch(upstream, release):
            return Err(
                BackportError(
                    kind="unknown_release",
                    message=(
                        f"No upstream branch {upstream}/{release} found. "
                        "Did you fetch the latest changes?"
                    ),
                    hint=f"git fetch {upstream}",
                )
            )
    return Ok(None)


def resolve_source_branch(repo: Repository, branch: str | None) -> Result[str, BackportError]:
    name = branch or repo.current_branch()
    if not name:
        return Err(
            BackportError(
                kind="branch_unavailable",
                message="No branch given and HEAD is detached",
                hint="Pass the branch holding the change as an argument",
            )
        )
    if not repo.has_local_branch(name):
        return Err(
            BackportError(kind="branch_unavailable", message=f"{name} is not available locally")
        )
    return Ok(name)


def build_run_config(
    request: RunRequest,
    *,
    repo: Repository,
    project: ProjectConfig,
) -> Result[RunConfig, BackportError]:
    """Validate ``request`` and resolve it into a RunConfig."""
    title = (request.title or "").strip()
    if request.releases_file is None or request.body_file is None or not title:
        return Err(
            BackportError(
                kind="missing_argument",
                message="Missing required arguments",
                hint="--releases, --body and --title are required",
            )
        )

    releases_path = _require_file(request.releases_file)
    if isinstance(releases_path, Err):
        return releases_path
    body_path = _require_file(request.body_file)
    if isinstance(body_path, Err):
        return body_path

    releases = read_release_list(releases_path.value)
    if isinstance(releases, Err):
        return releases

    upstream = request.upstream or project.upstream
    verified = verify_releases(repo, upstream=upstream, releases=releases.value)
    if isinstance(verified, Err):
        return verified

    branch = resolve_source_branch(repo, request.branch)
    if isinstance(branch, Err):
        return branch

    if not request.local_only:
        gh = ensure_gh_available()
        if isinstance(gh, Err):
            return gh

    recovery_dir = repo.path
    if project.recovery_dir is not None:
        recovery_dir = repo.path / project.recovery_dir

    return Ok(
        RunConfig(
            branch=branch.value,
            releases=releases.value,
            title=title,
            body_file=body_path.value,
            base=request.base or project.base,
            upstream=upstream,
            remote=request.remote or project.remote,
            title_template=project.title_template,
            preview_fork=request.preview_fork,
            preview_body=project.preview_body,
            local_only=request.local_only,
            continue_existing=request.continue_existing,
            recovery_dir=recovery_dir,
        )
    )
