"""
Pipeline — composable, cancellable asynchronous request computations.

A Pipeline[T] is a cold description of work that, when run, produces
exactly one Result[T]. Nothing happens until run() is awaited or
subscribe() is called, and a pipeline can be run more than once.

A request pipeline connects four stages on the ROP railway:

  build (Result[RequestDescriptor])
    → transport.execute(request)        ← the only suspension point
      → validate_response(raw)
        → decoder.decode(payload, shape)

Combinators:
  map(f)        transform the success value
  flat_map(f)   run the pipeline f(value) after this one succeeds (alias: chain)
  within(ctx)   run inside an ExecutionContext

Failures short-circuit: a downstream stage, or a chained pipeline, is
never started once an upstream stage has failed, and the upstream failure
is handed on unchanged.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

import structlog

from todo_pipeline.domain.models import RawResult, RequestDescriptor
from todo_pipeline.domain.ports import PayloadDecoder, Transport
from todo_pipeline.execution import ExecutionContext
from todo_pipeline.failure import ErrorKind
from todo_pipeline.result import Failure, Result, Success
from todo_pipeline.subscription import Subscription
from todo_pipeline.validation import validate_response

T = TypeVar("T")
U = TypeVar("U")

log = structlog.get_logger()


class Pipeline(Generic[T]):
    """
    A single-outcome asynchronous computation with map/chain combinators.

        created = await Pipeline.request(builder.create_user(user), transport, codec, CreateUserResponse).run()
    """

    __slots__ = ("_computation", "_name")

    def __init__(self, computation: Callable[[], Awaitable[Result[T]]], name: str = "pipeline") -> None:
        self._computation = computation
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    # ─────────────────────── Factories ───────────────────────

    @staticmethod
    def of(result: Result[T], name: str = "constant") -> Pipeline[T]:
        """Lift an already known Result into a pipeline."""

        async def _computation() -> Result[T]:
            return result

        return Pipeline(_computation, name)

    @staticmethod
    def request(
        request: Result[RequestDescriptor],
        transport: Transport,
        decoder: PayloadDecoder,
        shape: Any,
        name: str = "request",
    ) -> Pipeline[T]:
        """
        Compose build → execute → validate → decode into one pipeline.

        `request` is the builder's output; a construction failure ends the
        pipeline before the transport is touched.
        """

        async def _computation() -> Result[T]:
            raw = await request.flat_map_async(
                lambda descriptor: _execute(transport, descriptor),
                ErrorKind.TRANSPORT_ERROR,
            )
            return raw.flat_map(validate_response).flat_map(lambda payload: decoder.decode(payload, shape))

        return Pipeline(_computation, name)

    # ─────────────────────── Combinators ───────────────────────

    def map(self, mapper: Callable[[T], U]) -> Pipeline[U]:
        """
        Transform the success value. Failures pass through untouched.

        A mapper that raises, or that returns None, ends the pipeline with
        STAGE_ERROR instead of escaping run().
        """

        async def _computation() -> Result[U]:
            return (await self.run()).flat_map(
                lambda value: Result.from_computation(
                    lambda: mapper(value),
                    ErrorKind.STAGE_ERROR,
                    f"map in {self._name!r} failed",
                )
            )

        return Pipeline(_computation, self._name)

    def flat_map(
        self,
        next_pipeline: Callable[[T], Pipeline[U] | Awaitable[Pipeline[U]]],
        name: str | None = None,
    ) -> Pipeline[U]:
        """
        Feed this pipeline's success value into building the next pipeline.

        `next_pipeline` may return a Pipeline or an awaitable of one. It is
        only called after this pipeline has produced a Success; on Failure
        the composite ends with that very failure and `next_pipeline` is
        never called. If `next_pipeline` raises, the composite ends with
        STAGE_ERROR.
        """

        async def _computation() -> Result[U]:
            upstream = await self.run()
            match upstream:
                case Success(value):
                    try:
                        downstream = next_pipeline(value)
                        if inspect.isawaitable(downstream):
                            downstream = await downstream
                    except Exception as e:
                        log.warning("pipeline.chain_failed", pipeline=self._name, error=str(e))
                        return Result.failure(
                            ErrorKind.STAGE_ERROR,
                            f"Building the pipeline after {self._name!r} failed: {e}",
                            e,
                        )
                    return await downstream.run()
                case Failure(_):
                    return upstream  # type: ignore[return-value]
            raise TypeError("unreachable")  # pragma: no cover

        return Pipeline(_computation, name or f"{self._name}.then")

    chain = flat_map

    def within(self, context: ExecutionContext) -> Pipeline[T]:
        """Run this pipeline inside an execution context (logging, timing)."""

        async def _computation() -> Result[T]:
            return await context.execute(self.run)

        return Pipeline(_computation, self._name)

    def named(self, name: str) -> Pipeline[T]:
        return Pipeline(self._computation, name)

    # ─────────────────────── Running ───────────────────────

    async def run(self) -> Result[T]:
        """Run the pipeline and return its single outcome."""
        return await self._computation()

    def subscribe(self, on_outcome: Callable[[Result[T]], Any]) -> Subscription[T]:
        """
        Start the pipeline on the running event loop.

        `on_outcome` receives exactly one Result, unless the returned
        Subscription is cancelled first, in which case it is never called.
        """
        return Subscription.start(self, on_outcome)

    def __repr__(self) -> str:
        return f"Pipeline({self._name!r})"


async def _execute(transport: Transport, request: RequestDescriptor) -> Result[RawResult]:
    """Hand the descriptor to the transport. Exceptions become TRANSPORT_ERROR upstream."""
    log.debug("transport.started", method=request.method.value, target=request.target)
    raw = await transport.execute(request)
    return raw.peek(
        lambda result: log.debug(
            "transport.completed",
            method=request.method.value,
            target=request.target,
            status_code=result.status_code,
            size_bytes=len(result.body),
        )
    ).peek_failure(lambda failure: log.warning("transport.failed", target=request.target, failure=str(failure)))
