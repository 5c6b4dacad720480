from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from backport.core.config import (
    CONFIG_FILENAME,
    ProjectConfig,
    load_project_config,
    load_project_config_or_default,
)
from backport.core.errors import ErrorCode
from backport.core.result import Err
from backport.git.repository import Repository, find_repository
from backport.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: Repository
    project: ProjectConfig
    console: ConsoleProtocol


def build_context(config_path: Path | None = None) -> CLIContext:
    """Locate the repository and load its ``.backport.toml``.

    Exits with ENV_ERROR outside a git repository or on an unreadable config.
    """
    repo_result = find_repository(Path.cwd())
    if isinstance(repo_result, Err):
        typer.echo(f"error: not a git repository: {repo_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    repo = repo_result.value

    if config_path is not None:
        project_result = load_project_config(config_path)
    else:
        project_result = load_project_config_or_default(repo.path / CONFIG_FILENAME)
    if isinstance(project_result, Err):
        typer.echo(f"error: {project_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(repo=repo, project=project_result.value, console=RichConsole())
