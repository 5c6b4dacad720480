from __future__ import annotations

from dataclasses import dataclass

from backport.git.repository import Repository
from backport.output.console import ConsoleProtocol
from backport.services.backport.decisions import Decisions
from backport.services.backport.model import RunConfig


@dataclass(frozen=True, slots=True)
class BackportRun:
    """Shared collaborators of one invocation, passed to every step."""

    config: RunConfig
    repo: Repository
    console: ConsoleProtocol
    decisions: Decisions
