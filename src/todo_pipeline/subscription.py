"""
Subscription — the consumer's cancellation handle for a running pipeline.

State machine:

    PENDING ──outcome ready──→ COMPLETED   (on_outcome called exactly once)
       │
       └────────cancel()─────→ CANCELLED   (on_outcome never called)

Whichever transition happens first wins; the other becomes a no-op. The
state change is guarded by a lock, so cancel() may race with completion
from any thread. Cancelling also cancels the asyncio task driving the
pipeline, which asks the transport to abandon its in-flight call; if the
transport finishes anyway the outcome is dropped.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Awaitable, Callable
from enum import Enum, unique
from typing import Any, Generic, Protocol, TypeVar

import structlog

from todo_pipeline.failure import ErrorKind
from todo_pipeline.result import Result

T = TypeVar("T")
log = structlog.get_logger()


class _Runnable(Protocol[T]):
    @property
    def name(self) -> str: ...

    def run(self) -> Awaitable[Result[T]]: ...


@unique
class SubscriptionState(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Subscription(Generic[T]):
    """
    Handle returned by Pipeline.subscribe().

    Must be created from inside a running event loop (use Subscription.start).
    """

    def __init__(self, name: str, on_outcome: Callable[[Result[T]], Any]) -> None:
        self._name = name
        self._on_outcome = on_outcome
        self._state = SubscriptionState.PENDING
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None

    @staticmethod
    def start(pipeline: _Runnable[T], on_outcome: Callable[[Result[T]], Any]) -> Subscription[T]:
        """
        Schedule `pipeline` on the running loop and return its handle.

        Raises RuntimeError when called outside a running event loop.
        """
        loop = asyncio.get_running_loop()
        subscription: Subscription[T] = Subscription(pipeline.name, on_outcome)
        subscription._loop = loop
        subscription._task = loop.create_task(subscription._drive(pipeline))
        return subscription

    # ─────────────────────── Introspection ───────────────────────

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def is_cancelled(self) -> bool:
        return self._state is SubscriptionState.CANCELLED

    @property
    def is_completed(self) -> bool:
        return self._state is SubscriptionState.COMPLETED

    # ─────────────────────── Consumer API ───────────────────────

    def cancel(self) -> None:
        """
        Abandon the pipeline. Idempotent; a no-op once an outcome was delivered.
        """
        with self._lock:
            if self._state is not SubscriptionState.PENDING:
                return
            self._state = SubscriptionState.CANCELLED

        log.info("subscription.cancelled", pipeline=self._name)
        if self._task is not None and self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._task.cancel)

    async def wait(self) -> None:
        """
        Wait until the driving task has finished, whatever the final state.

        Re-raises an exception raised by the consumer callback; an exception
        inside the pipeline is delivered as a STAGE_ERROR outcome instead.
        Cancellation is not an error here.
        """
        if self._task is None:
            return
        await asyncio.wait({self._task})
        if not self._task.cancelled():
            error = self._task.exception()
            if error is not None:
                raise error

    # ─────────────────────── Internals ───────────────────────

    async def _drive(self, pipeline: _Runnable[T]) -> None:
        try:
            outcome = await pipeline.run()
        except Exception as e:
            log.error("subscription.pipeline_crashed", pipeline=self._name, error=str(e))
            outcome = Result.failure(ErrorKind.STAGE_ERROR, f"Pipeline {self._name!r} raised: {e}", e)
        self._deliver(outcome)

    def _deliver(self, outcome: Result[T]) -> None:
        with self._lock:
            if self._state is not SubscriptionState.PENDING:
                log.debug("subscription.outcome_dropped", pipeline=self._name, state=self._state.value)
                return
            self._state = SubscriptionState.COMPLETED
        self._on_outcome(outcome)

    def __repr__(self) -> str:
        return f"Subscription({self._name!r}, {self._state.value})"
