"""Command-line tests for backport-pr."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest
from typer.testing import CliRunner

from backport import __version__
from backport.cli.app import app
from backport.test.fakes import FakeToolchain

runner = CliRunner()


def _args(tools: FakeToolchain, *extra: str) -> list[str]:
    releases = tools.root / "releases"
    releases.write_text("v1.0\nv1.1\n", encoding="utf-8")
    body = tools.root / "body.md"
    body.write_text("Body\n", encoding="utf-8")
    return ["-r", str(releases), "-b", str(body), "-t", "Fix stuff", *extra]


class TestArguments:
    def test_help(self) -> None:
        result = runner.invoke(app, ["-h"])

        assert result.exit_code == 0
        assert "--releases" in result.output
        assert 'backport-pr -r releases -b body -t "Fix stuff" -l' in result.output

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == __version__

    def test_unknown_flag(self, tools: FakeToolchain) -> None:
        result = runner.invoke(app, [*_args(tools), "-z"])

        assert result.exit_code == 1
        assert "No such option: -z" in result.output
        assert tools.calls == []

    def test_option_missing_its_value(self, tools: FakeToolchain) -> None:
        result = runner.invoke(app, ["-t", "Fix stuff", "-r"])

        assert result.exit_code == 1
        assert "requires an argument" in result.output
        assert tools.calls == []

    def test_missing_required_arguments(self, tools: FakeToolchain) -> None:
        result = runner.invoke(app, ["-t", "Fix stuff"])

        assert result.exit_code == 1
        assert "Missing required arguments" in result.output
        assert "--preview-fork" in result.output
        assert tools.calls_starting_with("checkout") == []

    def test_extra_positional_arguments(self, tools: FakeToolchain) -> None:
        result = runner.invoke(app, [*_args(tools), "feature-x", "stray", "more"])

        assert result.exit_code == 1
        assert "Unprocessed positional arguments: stray more" in result.output
        assert tools.calls == []

    def test_unknown_release(self, tools: FakeToolchain) -> None:
        tools.remote_branches.discard("upstream/v1.1")

        result = runner.invoke(app, _args(tools))

        assert result.exit_code == 1
        assert "No upstream branch upstream/v1.1 found" in result.output
        assert tools.calls_starting_with("checkout") == []

    def test_missing_gh(self, tools: FakeToolchain, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(shutil, "which", lambda name: None)

        result = runner.invoke(app, _args(tools))

        assert result.exit_code == 2
        assert "gh: missing" in result.output

    def test_missing_explicit_config(self, tools: FakeToolchain) -> None:
        result = runner.invoke(app, _args(tools, "--config", str(tools.root / "nope.toml")))

        assert result.exit_code == 2
        assert "Config file not found" in result.output


class TestRun:
    def test_backports_current_branch(self, tools: FakeToolchain) -> None:
        result = runner.invoke(app, _args(tools), input="\n\n")

        assert result.exit_code == 0, result.output
        assert "Attempting to patch v1.0 ..." in result.output
        assert "https://github.com/example/project/pull/2" in result.output
        assert "2 succeeded, 0 failed" in result.output
        assert tools.current == "feature-x"

    def test_failed_releases_do_not_change_exit_code(self, tools: FakeToolchain) -> None:
        tools.conflicts["feature-x-v1.0-patch"] = 1

        result = runner.invoke(app, _args(tools), input="4\n\n")

        assert result.exit_code == 0, result.output
        assert "Retry using -X theirs" in result.output
        assert "1 succeeded, 1 failed" in result.output
        assert (tools.root / "backport-v1.0.sh").is_file()

    def test_local_only_with_explicit_branch(self, tools: FakeToolchain) -> None:
        tools.local_branches.add("update-doc-titles")

        result = runner.invoke(app, [*_args(tools, "-l"), "update-doc-titles"])

        assert result.exit_code == 0, result.output
        assert "update-doc-titles-v1.1-patch" in tools.local_branches
        assert tools.gh_calls == []
        assert tools.current == "update-doc-titles"

    def test_project_config_is_read(self, tools: FakeToolchain) -> None:
        (tools.root / ".backport.toml").write_text(
            '[backport]\ntitle_template = "[{release}] {title}"\n', encoding="utf-8"
        )

        result = runner.invoke(app, _args(tools), input="\n\n")

        assert result.exit_code == 0, result.output
        assert "[v1.0] Fix stuff" in tools.gh_calls[0]


def test_repository_required(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def not_a_repo(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(cmd, 128, "", "fatal: not a git repository")

    monkeypatch.setattr(subprocess, "run", not_a_repo)

    result = runner.invoke(app, ["-t", "x"])

    assert result.exit_code == 2
    assert "not a git repository" in result.output
