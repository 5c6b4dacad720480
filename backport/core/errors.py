"""Error codes for CLI exit status.

A batch that ran to completion exits with OK even if some releases failed;
per-release failures are reported in the summary, not in the exit status.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the backport command.

    These values are used as process exit codes and should remain stable:
    - 0: Batch completed (or help/version shown)
    - 1: User error (missing flags, missing files, unknown releases or branch)
    - 2: Environment error (not a git repository, gh missing, bad config)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
