"""Tests for pre-flight validation."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from backport.core.config import ProjectConfig
from backport.core.result import Err, Ok, Result
from backport.git.repository import Repository
from backport.services.backport.errors import BackportError
from backport.services.backport.model import RunConfig
from backport.services.backport.preflight import (
    RunRequest,
    build_run_config,
    resolve_source_branch,
    verify_releases,
)
from backport.test.fakes import FakeToolchain


def _inputs(tools: FakeToolchain, releases: str = "v1.0\nv1.1\n") -> tuple[Path, Path]:
    releases_file = tools.root / "releases"
    releases_file.write_text(releases, encoding="utf-8")
    body = tools.root / "body.md"
    body.write_text("Body\n", encoding="utf-8")
    return releases_file, body


def _build(
    tools: FakeToolchain, request: RunRequest, project: ProjectConfig | None = None
) -> Result[RunConfig, BackportError]:
    return build_run_config(
        request,
        repo=Repository(tools.root),
        project=project or ProjectConfig(),
    )


class TestBuildRunConfig:
    def test_valid_request(self, tools: FakeToolchain) -> None:
        releases, body = _inputs(tools)

        result = _build(tools, RunRequest(releases, body, "Fix docs"))

        assert isinstance(result, Ok)
        config = result.value
        assert config.branch == "feature-x"
        assert config.releases == ("v1.0", "v1.1")
        assert config.body_file == body.resolve()
        assert config.base == "main"
        assert config.recovery_dir == tools.root

    @pytest.mark.parametrize(
        "missing",
        ["releases_file", "body_file", "title"],
    )
    def test_missing_required_argument(self, tools: FakeToolchain, missing: str) -> None:
        releases, body = _inputs(tools)
        values: dict[str, object] = {
            "releases_file": releases,
            "body_file": body,
            "title": "Fix docs",
        }
        values[missing] = None

        result = _build(tools, RunRequest(**values))  # type: ignore[arg-type]

        assert isinstance(result, Err)
        assert result.error.kind == "missing_argument"
        assert result.error.message == "Missing required arguments"

    def test_blank_title_is_missing(self, tools: FakeToolchain) -> None:
        releases, body = _inputs(tools)

        result = _build(tools, RunRequest(releases, body, "   "))

        assert isinstance(result, Err)
        assert result.error.kind == "missing_argument"

    def test_title_is_trimmed(self, tools: FakeToolchain) -> None:
        releases, body = _inputs(tools)

        result = _build(tools, RunRequest(releases, body, "  Fix docs \n"))

        assert isinstance(result, Ok)
        assert result.value.pr_title("v1.0") == "Fix docs (v1.0 patch)"

    def test_releases_not_a_file(self, tools: FakeToolchain) -> None:
        _, body = _inputs(tools)

        result = _build(tools, RunRequest(tools.root / "nope", body, "t"))

        assert isinstance(result, Err)
        assert result.error.kind == "not_a_file"
        assert result.error.message == f"Not a file: {tools.root / 'nope'}"

    def test_body_is_a_directory(self, tools: FakeToolchain) -> None:
        releases, _ = _inputs(tools)

        result = _build(tools, RunRequest(releases, tools.root, "t"))

        assert isinstance(result, Err)
        assert result.error.kind == "not_a_file"

    def test_unknown_release_names_the_ref(self, tools: FakeToolchain) -> None:
        releases, body = _inputs(tools, "v1.0\nv2.0\n")

        result = _build(tools, RunRequest(releases, body, "t"))

        assert isinstance(result, Err)
        assert result.error.message == (
            "No upstream branch upstream/v2.0 found. Did you fetch the latest changes?"
        )
        assert result.error.hint == "git fetch upstream"

    def test_upstream_override_is_checked(self, tools: FakeToolchain) -> None:
        releases, body = _inputs(tools, "v1.0\n")

        result = _build(tools, RunRequest(releases, body, "t", upstream="canonical"))

        assert isinstance(result, Err)
        assert "canonical/v1.0" in result.error.message

    def test_missing_source_branch(self, tools: FakeToolchain) -> None:
        releases, body = _inputs(tools)

        result = _build(tools, RunRequest(releases, body, "t", branch="gone"))

        assert isinstance(result, Err)
        assert result.error.message == "gone is not available locally"

    def test_missing_gh(self, tools: FakeToolchain, monkeypatch: pytest.MonkeyPatch) -> None:
        releases, body = _inputs(tools)
        monkeypatch.setattr(shutil, "which", lambda name: None)

        result = _build(tools, RunRequest(releases, body, "t"))

        assert isinstance(result, Err)
        assert result.error.kind == "gh_missing"

    def test_local_only_does_not_need_gh(
        self, tools: FakeToolchain, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        releases, body = _inputs(tools)
        monkeypatch.setattr(shutil, "which", lambda name: None)

        result = _build(tools, RunRequest(releases, body, "t", local_only=True))

        assert isinstance(result, Ok)
        assert result.value.local_only is True

    def test_checks_run_before_any_mutation(self, tools: FakeToolchain) -> None:
        releases, body = _inputs(tools, "v9\n")

        _build(tools, RunRequest(releases, body, "t"))

        assert {c[0] for c in tools.git_calls} <= {"show-ref", "rev-parse"}

    def test_flags_override_project_config(self, tools: FakeToolchain) -> None:
        releases, body = _inputs(tools)
        project = ProjectConfig(
            base="develop",
            remote="fork",
            title_template="[{release}] {title}",
            recovery_dir="recovery",
        )

        result = _build(tools, RunRequest(releases, body, "t", base="trunk"), project)

        assert isinstance(result, Ok)
        config = result.value
        assert config.base == "trunk"
        assert config.remote == "fork"
        assert config.pr_title("v1.0") == "[v1.0] t"
        assert config.recovery_dir == tools.root / "recovery"


class TestSourceBranch:
    def test_detached_head(self, tools: FakeToolchain) -> None:
        tools.current = None

        result = resolve_source_branch(Repository(tools.root), None)

        assert isinstance(result, Err)
        assert result.error.kind == "branch_unavailable"

    def test_explicit_branch(self, tools: FakeToolchain) -> None:
        tools.local_branches.add("other")

        assert resolve_source_branch(Repository(tools.root), "other") == Ok("other")


class TestVerifyReleases:
    def test_stops_at_first_unknown(self, tools: FakeToolchain) -> None:
        result = verify_releases(
            Repository(tools.root), upstream="upstream", releases=("v1.0", "x", "y")
        )

        assert isinstance(result, Err)
        assert "upstream/x" in result.error.message
        assert len(tools.calls_starting_with("show-ref")) == 2
