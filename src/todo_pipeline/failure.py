"""
Failure description — structured error information for the failure track.

Every stage of a request pipeline reports problems as an ApiFailure carried
by Result.failure. The ErrorKind tells a consumer WHERE the pipeline broke:

  construction  → INVALID_BODY, INVALID_ENDPOINT   (local, never touches the network)
  transport     → TRANSPORT_ERROR                   (opaque passthrough from the adapter)
  validation    → INVALID_RESPONSE, STATUS_CODE     (server answered, status unusable)
  decoding      → DECODE_FAILURE                    (server answered, shape was wrong)
  composition   → STAGE_ERROR                       (a map or chain function raised)

Cancellation is not an ErrorKind: a cancelled subscription simply never
delivers an outcome.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorKind(Enum):
    """Error taxonomy of the request pipeline."""

    # --- Construction-time (programming or configuration defects) ---
    INVALID_BODY = "INVALID_BODY"
    """The request payload could not be encoded."""

    INVALID_ENDPOINT = "INVALID_ENDPOINT"
    """The target URI could not be composed from base URL and path."""

    # --- Execution-time ---
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    """Network-level failure reported by the transport adapter."""

    INVALID_RESPONSE = "INVALID_RESPONSE"
    """Response metadata cannot be interpreted as an HTTP response."""

    STATUS_CODE = "STATUS_CODE"
    """Server rejected the call with a non-2xx status (code preserved)."""

    DECODE_FAILURE = "DECODE_FAILURE"
    """Response body does not match the expected shape (diagnostic preserved)."""

    STAGE_ERROR = "STAGE_ERROR"
    """A caller-supplied map or chain function raised instead of returning."""

    @property
    def is_construction_error(self) -> bool:
        return self in (ErrorKind.INVALID_BODY, ErrorKind.INVALID_ENDPOINT)


@dataclass(frozen=True, slots=True)
class ApiFailure:
    """
    Immutable failure descriptor carrying kind, message, optional status code,
    optional exception, and timestamp.

    >>> failure = ApiFailure.status(404)
    >>> failure.kind
    <ErrorKind.STATUS_CODE: 'STATUS_CODE'>
    >>> failure.status_code
    404
    """

    kind: ErrorKind
    message: str
    status_code: Optional[int] = None
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC), compare=False)

    @staticmethod
    def create(
        kind: ErrorKind,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> ApiFailure:
        return ApiFailure(kind=kind, message=message, exception=exception)

    @staticmethod
    def status(code: int) -> ApiFailure:
        """Failure for a response whose status code lies outside [200, 300)."""
        return ApiFailure(
            kind=ErrorKind.STATUS_CODE,
            message=f"Unexpected HTTP status {code}",
            status_code=code,
        )

    def full_stack_trace(self) -> str:
        """Message plus the formatted exception chain, if any."""
        if self.exception is None:
            return self.message
        tb = "".join(traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__))
        return f"{self.message}\n{tb}"

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.kind.value}({self.status_code}): {self.message}"
        return f"{self.kind.value}: {self.message}"
