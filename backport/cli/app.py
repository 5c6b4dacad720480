from __future__ import annotations

from pathlib import Path

import click
import typer
from typer.core import TyperCommand

from backport import __version__
from backport.cli.context import build_context
from backport.cli.prompts import TerminalDecisions
from backport.core.errors import ErrorCode
from backport.core.result import Err
from backport.output.errors import backport_error_exit_code, print_backport_error
from backport.services.backport import (
    BackportRun,
    RunRequest,
    build_run_config,
    print_summary,
    run_backport,
)

HELP = """\
Given changes in a local branch of a fork and a list of releases to patch, open
PRs with the changes targeting the release branches of each respective release.

If no branch is given, the currently checked out branch is used.

Examples:

\b
  backport-pr -r releases -b body -t "Fix stuff" update-doc-titles
  # Don't push or open PRs:
  backport-pr -r releases -b body -t "Fix stuff" -l
  # On finding existing branches, open PRs using them instead of failing
  # (useful after running locally with -l):
  backport-pr -r releases -b body -t "Fix stuff" -c
"""

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode=None,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))


class BackportCommand(TyperCommand):
    """Report usage errors (unknown flags, options missing a value) as input errors."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.show()
            raise typer.Exit(code=int(ErrorCode.USER_ERROR)) from e


@app.command(cls=BackportCommand, help=HELP)
def backport(
    typer_ctx: typer.Context,
    positional: list[str] | None = typer.Argument(
        None,
        metavar="[BRANCH]",
        help="Branch holding the change (default: current branch)",
        show_default=False,
    ),
    releases: Path | None = typer.Option(
        None, "--releases", "-r", metavar="FILE", help="File containing list of releases to patch"
    ),
    body: Path | None = typer.Option(
        None, "--body", "-b", metavar="FILE", help="File containing PR body"
    ),
    title: str | None = typer.Option(None, "--title", "-t", help="PR title"),
    preview_fork: str | None = typer.Option(
        None, "--preview-fork", "-p", metavar="FORK", help="Preview PR creation in FORK"
    ),
    base: str | None = typer.Option(
        None, "--base", "-B", metavar="BASE", help="Rebase base (default: main)"
    ),
    local_only: bool = typer.Option(False, "--local-only", "-l", help="Only do local work"),
    continue_existing: bool = typer.Option(
        False, "--continue", "-c", help="Continue: open PRs for existing branches"
    ),
    upstream: str | None = typer.Option(
        None, "--upstream", metavar="REMOTE", help="Remote holding release branches (default: upstream)"
    ),
    remote: str | None = typer.Option(
        None, "--remote", metavar="REMOTE", help="Remote to push patch branches to (default: origin)"
    ),
    config: Path | None = typer.Option(
        None, "--config", metavar="PATH", help="Project config (default: .backport.toml at repo root)"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    del version
    extra = (positional or [])[1:]
    if extra:
        typer.echo(f"error: Unprocessed positional arguments: {' '.join(extra)}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx = build_context(config)

    request = RunRequest(
        releases_file=releases,
        body_file=body,
        title=title,
        branch=(positional or [None])[0],
        preview_fork=preview_fork,
        base=base,
        upstream=upstream,
        remote=remote,
        local_only=local_only,
        continue_existing=continue_existing,
    )
    resolved = build_run_config(request, repo=ctx.repo, project=ctx.project)
    if isinstance(resolved, Err):
        print_backport_error(resolved.error, ctx.console)
        if resolved.error.kind == "missing_argument":
            typer.echo(typer_ctx.get_help())
        raise typer.Exit(code=backport_error_exit_code(resolved.error))

    run = BackportRun(
        config=resolved.value,
        repo=ctx.repo,
        console=ctx.console,
        decisions=TerminalDecisions(ctx.console),
    )
    batch = run_backport(run)
    print_summary(batch, ctx.console)


def main() -> None:
    app()
