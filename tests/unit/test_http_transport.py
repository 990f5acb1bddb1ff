"""
Unit tests for the httpx transport adapter.

Uses respx to mock httpx HTTP calls (never makes real HTTP requests).

Test categories:
  - Request mapping: method, URL, headers, body, timeout
  - Any status is a transport success (judging it is the validator's job)
  - Timeout/network errors → Result.failure(TRANSPORT_ERROR), never raises
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
import respx

from todo_pipeline.adapters.http_transport import HttpxTransport
from todo_pipeline.assertions import ResultAssertions
from todo_pipeline.domain.models import HttpMethod, RequestDescriptor
from todo_pipeline.failure import ErrorKind

TODOS_URL = "http://localhost:8080/todos"


@pytest_asyncio.fixture()
async def http_transport() -> AsyncIterator[HttpxTransport]:
    async with httpx.AsyncClient() as client:
        yield HttpxTransport(client)


def _descriptor(method: HttpMethod = HttpMethod.GET, body: bytes | None = None, timeout: float | None = 5.0):
    return RequestDescriptor(
        method=method,
        target=TODOS_URL,
        headers={"Authorization": "Bearer tok", "Content-Type": "application/json"},
        body=body,
        timeout=timeout,
    )


class TestRequestMapping:
    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_method_headers_and_body(self, http_transport: HttpxTransport) -> None:
        route = respx.post(TODOS_URL).mock(return_value=httpx.Response(201, json={"id": 1, "title": "x"}))

        await http_transport.execute(_descriptor(HttpMethod.POST, body=b'{"title":"x"}'))

        request = route.calls.last.request
        assert request.headers["authorization"] == "Bearer tok"
        assert request.headers["content-type"] == "application/json"
        assert request.content == b'{"title":"x"}'

    @pytest.mark.asyncio
    @respx.mock
    async def test_descriptor_timeout_is_applied(self, http_transport: HttpxTransport) -> None:
        route = respx.get(TODOS_URL).mock(return_value=httpx.Response(200, json=[]))

        await http_transport.execute(_descriptor(timeout=2.5))

        timeout = route.calls.last.request.extensions["timeout"]
        assert timeout["read"] == 2.5
        assert timeout["connect"] == 2.5


class TestRawResult:
    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_status_headers_and_body(self, http_transport: HttpxTransport) -> None:
        respx.get(TODOS_URL).mock(return_value=httpx.Response(200, json=[{"id": 1, "title": "a"}]))

        raw = ResultAssertions.assert_success(await http_transport.execute(_descriptor()))

        assert raw.status_code == 200
        assert json.loads(raw.body) == [{"id": 1, "title": "a"}]
        assert raw.headers["content-type"] == "application/json"

    @pytest.mark.parametrize("status", [401, 404, 500])
    @pytest.mark.asyncio
    @respx.mock
    async def test_error_status_is_still_a_transport_success(
        self, http_transport: HttpxTransport, status: int
    ) -> None:
        respx.get(TODOS_URL).mock(return_value=httpx.Response(status))

        raw = ResultAssertions.assert_success(await http_transport.execute(_descriptor()))

        assert raw.status_code == status


class TestTransportFailures:
    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_returns_transport_error(self, http_transport: HttpxTransport) -> None:
        respx.get(TODOS_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

        result = await http_transport.execute(_descriptor())

        ResultAssertions.assert_failure(result, ErrorKind.TRANSPORT_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "timed out")

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_error_returns_transport_error(self, http_transport: HttpxTransport) -> None:
        respx.get(TODOS_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        result = await http_transport.execute(_descriptor())

        error = ResultAssertions.assert_failure(result, ErrorKind.TRANSPORT_ERROR)
        assert isinstance(error.exception, httpx.ConnectError)
