from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from backport.test.fakes import FakeToolchain


@pytest.fixture
def tools(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeToolchain:
    """A repository on ``feature-x`` with upstream/v1.0 and upstream/v1.1 fetched."""
    fake = FakeToolchain(root=tmp_path / "repo")
    fake.local_branches.add("feature-x")
    fake.current = "feature-x"
    fake.remote_branches.update({"upstream/v1.0", "upstream/v1.1"})
    monkeypatch.setattr(subprocess, "run", fake)
    monkeypatch.setattr(shutil, "which", lambda name: f"/usr/bin/{name}")
    return fake
