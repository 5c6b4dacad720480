"""Git repository abstraction.

This module provides the Repository class with the git operations a backport
run needs: ref checks, checkout, branch creation, rebase control, unmerged
file queries and push. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.rebase_onto(onto="upstream/v1.0", upstream="main", branch="fix-v1.0-patch"):
        case Ok(_):
            print("rebased")
        case Err(e):
            print(f"conflicts: {e.message}")
            repo.rebase_abort()
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from backport.core.result import Err, Ok, Result
from backport.platform.process import ProcessError
from backport.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_GIT_REBASE_TIMEOUT_SECONDS = 10 * 60.0

# Accept the default message when `rebase --continue` wants to commit.
_NON_INTERACTIVE_EDITOR = {"GIT_EDITOR": "true"}

__all__ = [
    "GitError",
    "Repository",
    "StatusEntry",
    "find_repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in ``git status --porcelain``.

    Attributes:
        xy: Two-character status code (e.g., "M ", "UU", "DU")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_unmerged(self) -> bool:
        """True if the path is in conflict."""
        return self.xy in {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}

    @property
    def is_deleted_by_us(self) -> bool:
        return self.xy == "DU"

    @property
    def is_deleted_by_them(self) -> bool:
        return self.xy == "UD"

    def pretty_xy(self) -> str:
        """Format XY with dots for spaces (". M" instead of " M")."""
        return self.xy.replace(" ", ".")


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # -- refs -----------------------------------------------------------------

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch in {"", "HEAD"} else branch
            case Err(_):
                return None

    def has_ref(self, ref: str) -> bool:
        """Check that a fully qualified ref exists (loose or packed)."""
        return isinstance(self._run(["show-ref", "--verify", "--quiet", ref]), Ok)

    def has_local_branch(self, branch: str) -> bool:
        return self.has_ref(f"refs/heads/{branch}")

    def has_remote_branch(self, remote: str, branch: str) -> bool:
        return self.has_ref(f"refs/remotes/{remote}/{branch}")

    # -- branches -------------------------------------------------------------

    def checkout(self, branch: str) -> Result[None, GitError]:
        result = self._run(["checkout", branch])
        if isinstance(result, Err):
            return Err(self._error("checkout", result.error, f"cannot check out {branch}"))
        return Ok(None)

    def create_branch(self, branch: str) -> Result[None, GitError]:
        """Create ``branch`` from HEAD and check it out.

        Fails when the branch already exists.
        """
        result = self._run(["checkout", "-b", branch])
        if isinstance(result, Err):
            return Err(self._error("checkout -b", result.error, f"cannot create {branch}"))
        return Ok(None)

    # -- rebase ---------------------------------------------------------------

    def rebase_onto(
        self,
        *,
        onto: str,
        upstream: str,
        branch: str,
        strategy_option: str | None = None,
    ) -> Result[str, GitError]:
        """Replay ``upstream..branch`` on top of ``onto``.

        Args:
            onto: New base (e.g. "upstream/v1.0")
            upstream: Boundary of the commits to replay (e.g. "main")
            branch: Branch being rebased
            strategy_option: Value for ``-X`` ("theirs" or "ours")

        Returns:
            Ok(output) on success, Err(GitError) on conflicts or failure.
            On conflicts the rebase is left in progress.
        """
        args = ["rebase", "--onto", onto, upstream, branch]
        if strategy_option is not None:
            args += ["-X", strategy_option]
        result = self._run(args)
        if isinstance(result, Err):
            # CONFLICT lines go to stdout, "could not apply" to stderr
            e = result.error
            message = "\n".join(s for s in (e.stdout.strip(), e.stderr.strip()) if s)
            return Err(
                GitError(
                    command="rebase",
                    message=message or "rebase failed",
                    returncode=e.returncode,
                )
            )
        return Ok(result.value.strip())

    def rebase_abort(self) -> Result[None, GitError]:
        result = self._run(["rebase", "--abort"])
        if isinstance(result, Err):
            return Err(self._error("rebase --abort", result.error, "rebase abort failed"))
        return Ok(None)

    def rebase_continue(self) -> Result[str, GitError]:
        """Continue a rebase without opening an editor."""
        result = self._run(["rebase", "--continue"], env=_NON_INTERACTIVE_EDITOR)
        if isinstance(result, Err):
            return Err(self._error("rebase --continue", result.error, "rebase continue failed"))
        return Ok(result.value.strip())

    def rebase_in_progress(self) -> bool:
        """True if a rebase (merge or apply backend) is stopped midway."""
        for name in ("rebase-merge", "rebase-apply"):
            result = self._run(["rev-parse", "--git-path", name])
            if isinstance(result, Ok) and (self.path / result.value.strip()).exists():
                return True
        return False

    # -- working tree ---------------------------------------------------------

    def status_entries(self) -> Result[list[StatusEntry], GitError]:
        """Parse ``git status --porcelain=v1 -z`` into entries.

        With ``-z`` paths are NUL-terminated and never C-quoted, so names with
        spaces or non-ASCII characters come back verbatim.
        """
        result = self._run(["status", "--porcelain=v1", "-z"])
        if isinstance(result, Err):
            return Err(self._error("status", result.error, "git status failed"))

        entries: list[StatusEntry] = []
        fields = iter(result.value.split("\0"))
        for field in fields:
            entry = self._parse_entry(field)
            if entry is None:
                continue
            if entry.xy[0] in "RC":
                # renames and copies carry the original path as a second field
                next(fields, None)
            entries.append(entry)
        return Ok(entries)

    def unmerged_entries(self) -> Result[list[StatusEntry], GitError]:
        result = self.status_entries()
        if isinstance(result, Err):
            return result
        return Ok([e for e in result.value if e.is_unmerged])

    def remove(self, paths: list[str]) -> Result[None, GitError]:
        """``git rm`` the given paths (no-op for an empty list)."""
        if not paths:
            return Ok(None)
        result = self._run(["rm", "--quiet", "--", *paths])
        if isinstance(result, Err):
            return Err(self._error("rm", result.error, "git rm failed"))
        return Ok(None)

    # -- remote ---------------------------------------------------------------

    def push_upstream(self, remote: str, branch: str) -> Result[str, GitError]:
        """Push ``branch`` to ``remote`` and set it as upstream."""
        result = self._run(["push", "-u", remote, branch])
        if isinstance(result, Err):
            return Err(self._error("push", result.error, f"cannot push {branch}"))
        return Ok(result.value.strip())

    # -- internals ------------------------------------------------------------

    def _run(
        self,
        args: list[str],
        *,
        env: dict[str, str] | None = None,
    ) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        if command in {"fetch", "pull", "push", "clone"}:
            timeout = _GIT_NETWORK_TIMEOUT_SECONDS
        elif command == "rebase":
            timeout = _GIT_REBASE_TIMEOUT_SECONDS
        else:
            timeout = _GIT_TIMEOUT_SECONDS
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            env=env,
            timeout=timeout,
        )

    @staticmethod
    def _error(command: str, error: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=error.output or fallback,
            returncode=error.returncode,
        )

    @staticmethod
    def _parse_entry(field: str) -> StatusEntry | None:
        """Parse a single NUL-separated status field: ``XY path``."""
        if len(field) < 4:
            return None
        return StatusEntry(xy=field[:2], path=field[3:])


def find_repository(cwd: Path) -> Result[Repository, GitError]:
    """Locate the repository containing ``cwd``."""
    result = run_process(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=cwd,
        timeout=_GIT_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(
            GitError(
                command="rev-parse",
                message=result.error.output or f"not a git repository: {cwd}",
                returncode=result.error.returncode,
            )
        )
    return Ok(Repository(Path(result.value.strip())))
