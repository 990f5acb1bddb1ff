"""
Execution contexts — separate WHAT a pipeline computes from HOW it is run.

A Pipeline describes the computation; an ExecutionContext wraps the act of
running it with cross-cutting behaviour (timing, logging). They are never
mixed: stages stay pure, the context owns the side effects.

    pipeline = api.create_user(user).within(LoggingExecutionContext(operation="create_user"))
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar, runtime_checkable

import structlog

from todo_pipeline.failure import ErrorKind
from todo_pipeline.result import Result

T = TypeVar("T")
log = structlog.get_logger()


@runtime_checkable
class ExecutionContext(Protocol):
    """Any class with an async execute(computation) satisfies this protocol."""

    async def execute(self, computation: Callable[[], Awaitable[Result[T]]]) -> Result[T]: ...


class NoOpExecutionContext:
    """Passthrough context — runs the computation without any wrapper."""

    async def execute(self, computation: Callable[[], Awaitable[Result[T]]]) -> Result[T]:
        return await computation()


class LoggingExecutionContext:
    """
    Context that logs start, finish, duration and outcome state.

    Wraps another context (decorator pattern) to add observability.
    Cancellation is logged and re-raised; an exception escaping the
    computation is logged and returned as a STAGE_ERROR failure.

        ctx = LoggingExecutionContext(operation="login_then_post_todo")
    """

    def __init__(
        self,
        inner: ExecutionContext | None = None,
        operation: str = "unknown",
    ) -> None:
        self._inner = inner or NoOpExecutionContext()
        self._operation = operation

    @property
    def operation(self) -> str:
        return self._operation

    async def execute(self, computation: Callable[[], Awaitable[Result[T]]]) -> Result[T]:
        log.info("pipeline.started", operation=self._operation)
        start = time.monotonic()

        try:
            result = await self._inner.execute(computation)
        except asyncio.CancelledError:
            log.info("pipeline.abandoned", operation=self._operation, elapsed_seconds=_since(start))
            raise
        except Exception as e:
            log.error("pipeline.crashed", operation=self._operation, elapsed_seconds=_since(start), error=str(e))
            return Result.failure(ErrorKind.STAGE_ERROR, f"Execution failed: {e}", e)

        if result.is_success():
            log.info("pipeline.completed", operation=self._operation, elapsed_seconds=_since(start), state="SUCCESS")
        else:
            log.warning(
                "pipeline.completed",
                operation=self._operation,
                elapsed_seconds=_since(start),
                state="FAILURE",
                failure=str(result.error()),
            )
        return result


def _since(start: float) -> float:
    return round(time.monotonic() - start, 3)
