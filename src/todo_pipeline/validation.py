"""
Response validation — the single place where HTTP status codes are judged.

    RawResult ──validate_response──→ Result[bytes]

  - status missing or not an integer → INVALID_RESPONSE
  - status outside [200, 300)        → STATUS_CODE (code preserved)
  - otherwise                        → Success(body)
"""

from __future__ import annotations

import structlog

from todo_pipeline.domain.models import RawResult
from todo_pipeline.failure import ApiFailure, ErrorKind
from todo_pipeline.result import Result

log = structlog.get_logger()

SUCCESS_RANGE = range(200, 300)


def validate_response(raw: RawResult) -> Result[bytes]:
    """Accept a 2xx RawResult and hand on its body bytes."""
    status = raw.status_code
    # bool is an int subclass, but never a status code
    if not isinstance(status, int) or isinstance(status, bool):
        log.warning("response.invalid", status_code=repr(status))
        return Result.failure(
            ErrorKind.INVALID_RESPONSE,
            f"Response carries no interpretable HTTP status: {status!r}",
        )
    if status not in SUCCESS_RANGE:
        log.info("response.rejected", status_code=status)
        return Result.failure_from(ApiFailure.status(status))
    return Result.success(raw.body)
