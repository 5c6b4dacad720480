"""Tests for backport.core.result module."""

import pytest

from backport.core.result import Err, Ok, Result


class TestOk:
    """Tests for Ok type."""

    def test_ok_unwrap(self) -> None:
        assert Ok("v1.0").unwrap() == "v1.0"

    def test_repr(self) -> None:
        assert repr(Ok("x")) == "Ok('x')"

    def test_equality(self) -> None:
        assert Ok(1) == Ok(1)
        assert Ok(1) != Err(1)


class TestErr:
    """Tests for Err type."""

    def test_err_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="called unwrap on Err: boom"):
            Err("boom").unwrap()

    def test_repr(self) -> None:
        assert repr(Err("boom")) == "Err('boom')"


class TestPatternMatching:
    """Results are consumed with match statements throughout the workflow."""

    def test_match_ok(self) -> None:
        result: Result[int, str] = Ok(1)
        match result:
            case Ok(value):
                assert value == 1
            case Err(_):
                pytest.fail("expected Ok")

    def test_match_err(self) -> None:
        result: Result[int, str] = Err("nope")
        match result:
            case Ok(_):
                pytest.fail("expected Err")
            case Err(error):
                assert error == "nope"
