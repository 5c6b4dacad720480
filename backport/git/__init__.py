"""Git operations used by the backport workflow.

Usage:
    from backport.git import Repository, find_repository

    repo = find_repository(Path.cwd()).unwrap()
    if repo.has_remote_branch("upstream", "v1.0"):
        repo.checkout("fix-docs")
"""

from backport.git.repository import (
    GitError,
    Repository,
    StatusEntry,
    find_repository,
)

__all__ = [
    "GitError",
    "Repository",
    "StatusEntry",
    "find_repository",
]
