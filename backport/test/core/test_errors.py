"""Tests for backport.core.errors module."""

from backport.core.errors import ErrorCode


class TestErrorCode:
    def test_values_are_stable(self) -> None:
        assert ErrorCode.OK == 0
        assert ErrorCode.USER_ERROR == 1
        assert ErrorCode.ENV_ERROR == 2

    def test_str(self) -> None:
        assert str(ErrorCode.USER_ERROR) == "user error"
        assert str(ErrorCode.ENV_ERROR) == "env error"

    def test_is_success(self) -> None:
        assert ErrorCode.OK.is_success is True
        assert ErrorCode.USER_ERROR.is_success is False
