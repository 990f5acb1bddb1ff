"""
Test assertions for Result values.

Expressive assert helpers that produce clear failure messages:

    created = ResultAssertions.assert_success(result)
    ResultAssertions.assert_status_code(result, 401)
"""

from __future__ import annotations

from typing import Any, TypeVar

from todo_pipeline.failure import ApiFailure, ErrorKind
from todo_pipeline.result import Result

T = TypeVar("T")


class ResultAssertions:
    """Expressive test assertions for Result values."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """Assert the Result is a Success and return the value."""
        context = f" — {message}" if message else ""
        assert result.is_success(), f"Expected Success but got Failure({result.error()}){context}"
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[T],
        expected_kind: ErrorKind | None = None,
        message: str = "",
    ) -> ApiFailure:
        """Assert the Result is a Failure, optionally of the given kind."""
        context = f" — {message}" if message else ""
        assert result.is_failure(), f"Expected Failure but got Success({result.value()!r}){context}"
        error = result.error()
        if expected_kind is not None:
            assert error.kind == expected_kind, (
                f"Expected error kind {expected_kind.value} but got {error}{context}"
            )
        return error

    @staticmethod
    def assert_status_code(result: Result[T], expected_code: int) -> ApiFailure:
        """Assert the Result failed validation with exactly `expected_code`."""
        error = ResultAssertions.assert_failure(result, ErrorKind.STATUS_CODE)
        assert error.status_code == expected_code, (
            f"Expected status {expected_code} but got {error.status_code}"
        )
        return error

    @staticmethod
    def assert_failure_message_contains(result: Result[T], substring: str) -> None:
        """Case-insensitive substring check on the failure message."""
        error = ResultAssertions.assert_failure(result)
        assert substring.lower() in error.message.lower(), (
            f"Expected failure message to contain {substring!r} but message was: {error.message!r}"
        )

    @staticmethod
    def assert_success_value(result: Result[T], expected_value: Any) -> None:
        value = ResultAssertions.assert_success(result)
        assert value == expected_value, f"Expected success value {expected_value!r} but got {value!r}"
