"""
Ports — Protocol-based interfaces for the pipeline's external collaborators.

These define WHAT the pipeline needs without specifying HOW it's done.
Following hexagonal architecture:

  Pipeline engine ← Ports (protocols) ← Adapters (httpx, pydantic)

Each port is a Protocol (structural typing), so adapters and test fakes
satisfy the contract simply by implementing the methods.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from todo_pipeline.domain.models import RawResult, RequestDescriptor
from todo_pipeline.result import Result

T = TypeVar("T")


@runtime_checkable
class Transport(Protocol):
    """
    Port: execute one request descriptor and report the raw HTTP result.

    Network-level problems (refused connection, timeout, TLS) come back as
    Result.failure(TRANSPORT_ERROR). Any status code, 2xx or not, is a
    successful *transport* result; judging it is the validator's job.

    The transport may run the call on whatever task or thread it likes,
    and should abandon the call when the awaiting task is cancelled.
    """

    async def execute(self, request: RequestDescriptor) -> Result[RawResult]: ...


@runtime_checkable
class PayloadEncoder(Protocol):
    """
    Port: serialize a structured value into a request body.

    May raise; the request builder captures the error as INVALID_BODY.
    """

    def encode(self, value: Any) -> bytes: ...


@runtime_checkable
class PayloadDecoder(Protocol):
    """
    Port: convert validated response bytes into a value of the given shape.

    Must be total: shape mismatches and malformed input come back as
    Result.failure(DECODE_FAILURE) carrying the decoder's diagnostic,
    never as a raised exception. The payload is never mutated.
    """

    def decode(self, payload: bytes, shape: type[T]) -> Result[T]: ...
