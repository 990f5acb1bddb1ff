"""
Result monad — the outcome type of every pipeline stage.

A Result[T] is either Success(value: T) or Failure(error: ApiFailure).
Stages return Result, never throw. Errors propagate through the failure
track via .flat_map() short-circuiting:

    ┌─────────┐  flat_map  ┌───────────┐  flat_map  ┌──────────┐  flat_map  ┌────────┐
    │  build  │──Success───│  execute  │──Success───│ validate │──Success───│ decode │──→ Result[T]
    └────┬────┘            └─────┬─────┘            └────┬─────┘            └───┬────┘
         │ Failure               │ Failure               │ Failure              │ Failure
         └───────────────────────┴───────────────────────┴──────────────────────┴──→ Result[T]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    List,
    Optional,
    TypeVar,
)

from todo_pipeline.failure import ApiFailure, ErrorKind

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class Result(Generic[T]):
    """
    Success(value: T) or Failure(error: ApiFailure).

    All transformations short-circuit on failure, so only the success path
    is written and errors propagate automatically.

        >>> Result.success(21).map(lambda x: x * 2).value()
        42
        >>> Result.failure(ErrorKind.INVALID_BODY, "bad").map(lambda x: x * 2).is_failure()
        True
    """

    # ──────────────────────── Introspection ────────────────────────

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def value(self) -> T:
        """
        Extract the success value. Raises ValueError if called on a Failure.

        Prefer .either() or match/case for safe access.
        """
        match self:
            case Success(v):
                return v
            case Failure(err):
                raise ValueError(f"Cannot get value from a Failure: {err.message}")
        raise TypeError("unreachable")  # pragma: no cover

    def error(self) -> ApiFailure:
        """Extract the failure. Raises ValueError if called on a Success."""
        match self:
            case Failure(err):
                return err
            case Success(v):
                raise ValueError(f"Cannot get error from a Success: {v}")
        raise TypeError("unreachable")  # pragma: no cover

    # ──────────────────────── Core Transformations ────────────────────────

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[ApiFailure], R],
    ) -> R:
        """
        Apply one of two functions depending on the state.

            result.either(
                on_success=lambda todo: f"Created {todo.title}",
                on_failure=lambda err: f"Error: {err}",
            )
        """
        match self:
            case Success(v):
                return on_success(v)
            case Failure(err):
                return on_failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        """
        Transform the success value. Short-circuits on failure.

            Result.success(5).map(lambda x: x * 2)  # → Success(10)
        """
        match self:
            case Success(v):
                return Success(mapper(v))
            case Failure(_):
                return self  # type: ignore[return-value]
        raise TypeError("unreachable")  # pragma: no cover

    def map_failure(self, mapper: Callable[[ApiFailure], ApiFailure]) -> Result[T]:
        """Transform the failure. Passes through success unchanged."""
        match self:
            case Success(_):
                return self
            case Failure(err):
                return Failure(mapper(err))
        raise TypeError("unreachable")  # pragma: no cover

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        """
        Chain a Result-returning function. Short-circuits on failure.

        The failure is passed on as the very same object, so a downstream
        consumer sees exactly the error produced by the stage that broke.
        """
        match self:
            case Success(v):
                return mapper(v)
            case Failure(_):
                return self  # type: ignore[return-value]
        raise TypeError("unreachable")  # pragma: no cover

    # ──────────────────────── Side Effects ────────────────────────

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        """Execute a side effect on the success value without altering the Result."""
        match self:
            case Success(v):
                action(v)
        return self

    def peek_failure(self, action: Callable[[ApiFailure], Any]) -> Result[T]:
        """Execute a side effect on failure without altering the Result."""
        match self:
            case Failure(err):
                action(err)
        return self

    def get_or_else(self, default: T) -> T:
        """Extract value or return a default on failure."""
        match self:
            case Success(v):
                return v
            case _:
                return default

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure_from(error: ApiFailure) -> Result[T]:
        return Failure(error)

    @staticmethod
    def failure(
        kind: ErrorKind,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> Result[T]:
        """
        Create a failed Result with kind, message, and optional exception.

            Result.failure(ErrorKind.INVALID_ENDPOINT, "Malformed base URL")
        """
        return Failure(ApiFailure(kind=kind, message=message, exception=exception))

    @staticmethod
    def from_computation(
        computation: Callable[[], T],
        error_kind: ErrorKind,
        error_message: str,
    ) -> Result[T]:
        """
        Create a Result from a computation that may raise.

            return Result.from_computation(
                lambda: encoder.encode(user),
                ErrorKind.INVALID_BODY,
                "Failed to encode user",
            )
        """
        try:
            return Result.success(computation())
        except Exception as e:
            return Result.failure(error_kind, f"{error_message}: {e}", e)

    @staticmethod
    def all_of(results: List[Result[T]]) -> Result[List[T]]:
        """Collect Results into a Result of list; the first failure wins."""
        values: list[T] = []
        for r in results:
            match r:
                case Success(v):
                    values.append(v)
                case Failure(_):
                    return r  # type: ignore[return-value]
        return Success(values)

    # ──────────────────────── Async Support ────────────────────────

    async def flat_map_async(
        self,
        mapper: Callable[[T], Awaitable[Result[U]]],
        error_kind: ErrorKind = ErrorKind.TRANSPORT_ERROR,
    ) -> Result[U]:
        """
        Async flat_map — chain an async Result-returning function.

        An exception escaping the mapper lands on the failure track as
        `error_kind`. asyncio.CancelledError is not an Exception and
        propagates untouched.

            raw = await descriptor.flat_map_async(transport.execute)
        """
        match self:
            case Success(v):
                try:
                    return await mapper(v)
                except Exception as e:
                    return Failure(ApiFailure.create(error_kind, f"Async operation failed: {e}", e))
            case Failure(_):
                return self  # type: ignore[return-value]
        raise TypeError("unreachable")  # pragma: no cover

    # ──────────────────────── Dunder methods ────────────────────────

    def __bool__(self) -> bool:
        """`if result: ...` succeeds only on Success."""
        return self.is_success()


@dataclass(frozen=True, slots=True)
class Success(Result[T]):
    """The success track — wraps a value of type T."""

    _value: T

    def __init__(self, value: T) -> None:
        if value is None:
            raise TypeError("Success value must not be None")
        object.__setattr__(self, "_value", value)

    def __repr__(self) -> str:
        return f"Success({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Success):
            return self._value == other._value
        if isinstance(other, Result):
            return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("Success", self._value))


@dataclass(frozen=True, slots=True)
class Failure(Result[T]):
    """The failure track — wraps an ApiFailure."""

    _error: ApiFailure

    def __init__(self, error: ApiFailure) -> None:
        if error is None:
            raise TypeError("Failure error must not be None")
        object.__setattr__(self, "_error", error)

    def __repr__(self) -> str:
        return f"Failure({self._error})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Failure):
            return (
                self._error.kind == other._error.kind
                and self._error.message == other._error.message
                and self._error.status_code == other._error.status_code
            )
        if isinstance(other, Result):
            return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("Failure", self._error.kind, self._error.message, self._error.status_code))
