"""
HTTP adapter — executes RequestDescriptors via httpx.AsyncClient.

Adapter layer — implements the Transport port.

Every status code is a successful transport result here; judging it is the
validator's job. Only network-level problems (connect errors, timeouts,
protocol errors) are captured into Result failures as TRANSPORT_ERROR, so
no httpx exception leaks into the pipeline.

No retry: a failed call is reported once and the consumer decides whether
to resubmit a fresh pipeline.
"""

from __future__ import annotations

import httpx
import structlog

from todo_pipeline.domain.models import RawResult, RequestDescriptor
from todo_pipeline.failure import ErrorKind
from todo_pipeline.result import Result

log = structlog.get_logger()


class HttpxTransport:
    """
    Transport backed by a shared httpx.AsyncClient.

    The client is owned by the caller (usually the composition root) and may
    be shared by many concurrent pipelines; the transport holds no other state.
    The descriptor's timeout, when set, overrides the client default.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def execute(self, request: RequestDescriptor) -> Result[RawResult]:
        """
        Send the request and return its status, headers and body bytes.

        Returns Result.failure(TRANSPORT_ERROR, ...) on any httpx transport error.
        """
        timeout = httpx.Timeout(request.timeout) if request.timeout is not None else httpx.USE_CLIENT_DEFAULT
        try:
            response = await self._client.request(
                request.method.value,
                request.target,
                headers=dict(request.headers),
                content=request.body,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            log.warning("transport.timeout", method=request.method.value, target=request.target)
            return Result.failure(ErrorKind.TRANSPORT_ERROR, f"Request timed out: {request.target}", e)
        except httpx.HTTPError as e:
            log.warning("transport.error", method=request.method.value, target=request.target, error=str(e))
            return Result.failure(ErrorKind.TRANSPORT_ERROR, f"Request failed: {e}", e)

        return Result.success(
            RawResult(
                status_code=response.status_code,
                body=response.content,
                headers=dict(response.headers),
            )
        )
