"""Recovery scripts for releases whose rebase could not be completed.

The script is a side output for the operator; nothing reads it back.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from backport.core.result import Err, Ok, Result
from backport.services.backport.gh import pr_request_for
from backport.services.backport.model import RunConfig


def recovery_script_path(config: RunConfig, release: str) -> Path:
    safe = release.replace("/", "_")
    return config.recovery_dir / f"backport-{safe}.sh"


def _line(cmd: list[str]) -> str:
    return " ".join(shlex.quote(part) for part in cmd)


def render_recovery_script(config: RunConfig, release: str) -> str:
    patch_branch = config.patch_branch(release)
    lines = [
        "#!/usr/bin/env bash",
        f"# Finish backporting {config.branch} to {release} by hand.",
        "set -euo pipefail",
        "",
        _line(["git", "checkout", patch_branch]),
        _line(
            [
                "git",
                "rebase",
                "--onto",
                config.upstream_ref(release),
                config.base,
                patch_branch,
            ]
        ),
        "# On conflicts: fix the files, `git add` them, then `git rebase --continue`.",
    ]
    if not config.local_only:
        lines += [
            _line(["git", "push", "-u", config.remote, patch_branch]),
            _line(pr_request_for(config, release).command()),
        ]
    return "\n".join(lines) + "\n"


def write_recovery_script(config: RunConfig, release: str) -> Result[Path, str]:
    path = recovery_script_path(config, release)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_recovery_script(config, release), encoding="utf-8")
        path.chmod(0o755)
    except OSError as e:
        return Err(f"cannot write {path}: {e}")
    return Ok(path)
