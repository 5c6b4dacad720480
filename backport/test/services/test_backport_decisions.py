"""Tests for the scripted decisions provider."""

from __future__ import annotations

import pytest

from backport.services.backport.decisions import MenuOption, ScriptedDecisions

MENU = (MenuOption("1", "a", "First"), MenuOption("2", "b", "Second"))


class TestScriptedDecisions:
    def test_replays_in_order(self) -> None:
        decisions = ScriptedDecisions(answers=["2", "typed", ""])

        assert decisions.choose("Pick", MENU) == "b"
        assert decisions.ask("Say") == "typed"
        decisions.pause("Wait")
        assert decisions.prompts == ["Pick", "Say", "Wait"]

    def test_invalid_choice_is_none(self) -> None:
        assert ScriptedDecisions(answers=["3"]).choose("Pick", MENU) is None

    def test_running_out_is_an_error(self) -> None:
        with pytest.raises(RuntimeError, match="no scripted answer left for: Pick"):
            ScriptedDecisions().choose("Pick", MENU)
