"""
Shared fixtures for the todo-pipeline test suite.

Wires a TodoApi against the in-memory StubTransport from tests.stubs.
"""

from __future__ import annotations

import pytest

from tests.stubs import BASE_URL, StubTransport
from todo_pipeline.adapters.json_codec import JsonPayloadCodec
from todo_pipeline.api import TodoApi
from todo_pipeline.request_builder import RequestBuilder


@pytest.fixture()
def codec() -> JsonPayloadCodec:
    return JsonPayloadCodec()


@pytest.fixture()
def builder(codec: JsonPayloadCodec) -> RequestBuilder:
    return RequestBuilder(base_url=BASE_URL, encoder=codec)


@pytest.fixture()
def transport() -> StubTransport:
    return StubTransport()


@pytest.fixture()
def api(builder: RequestBuilder, transport: StubTransport, codec: JsonPayloadCodec) -> TodoApi:
    return TodoApi(builder=builder, transport=transport, decoder=codec)
