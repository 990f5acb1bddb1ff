"""
Unit tests for TodoApi — the concrete pipelines against a StubTransport.

Covers the four reference scenarios:
  1. create-user, server answers 201           → Success(CreateUserResponse)
  2. create-user, server answers 500           → Failure(STATUS_CODE 500), decode never invoked
  3. login → post-todo, Bearer token threaded  → Success(Todo)
  4. login answers 401                         → Failure(STATUS_CODE 401), post-todo never invoked
"""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from tests.stubs import StubTransport, json_result
from todo_pipeline.adapters.json_codec import JsonPayloadCodec
from todo_pipeline.api import TodoApi
from todo_pipeline.assertions import ResultAssertions
from todo_pipeline.domain.models import CreateUserResponse, RequestDescriptor, Todo, Token, User
from todo_pipeline.failure import ErrorKind
from todo_pipeline.request_builder import RequestBuilder
from todo_pipeline.result import Result

CREATED_USER = {"id": 2, "email": "user2@example.com", "name": "user2"}


class _CountingDecoder:
    """Wraps the real codec and counts decode calls."""

    def __init__(self) -> None:
        self._codec = JsonPayloadCodec()
        self.calls = 0

    def decode(self, payload: bytes, shape: type) -> Result:
        self.calls += 1
        return self._codec.decode(payload, shape)


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_201_decodes_created_user(self, api: TodoApi, transport: StubTransport) -> None:
        """
        GIVEN the server answers POST /users with 201 and the created user
        WHEN create_user(user2) runs
        THEN it returns Success(CreateUserResponse(id=2, ...)).
        """
        transport.route("POST", "/users", json_result(201, CREATED_USER))
        user = User(name="user2", email="user2@example.com", password="password2", verifyPassword="password2")

        result = await api.create_user(user).run()

        assert ResultAssertions.assert_success(result) == CreateUserResponse(
            id=2, email="user2@example.com", name="user2"
        )

    @pytest.mark.asyncio
    async def test_500_fails_without_decoding(self, builder: RequestBuilder, transport: StubTransport) -> None:
        """
        GIVEN the server answers POST /users with 500
        WHEN create_user runs
        THEN it returns Failure(STATUS_CODE 500) and the decoder is never called.
        """
        decoder = _CountingDecoder()
        api = TodoApi(builder, transport, decoder)
        transport.route("POST", "/users", json_result(500, {"error": "boom"}))

        result = await api.create_user(User.with_id(2)).run()

        ResultAssertions.assert_status_code(result, 500)
        assert decoder.calls == 0


class TestLoginThenPostTodo:
    @pytest.mark.asyncio
    async def test_token_is_threaded_into_bearer_header(self, api: TodoApi, transport: StubTransport) -> None:
        """
        GIVEN login answers 200 with {"string": "tok-abc"}
        AND post-todo answers 201 only when Authorization is "Bearer tok-abc"
        WHEN login_then_post_todo runs
        THEN it returns Success(Todo(id=10, title="Learn SwiftUI")).
        """

        def post_todo(request: RequestDescriptor):
            assert request.headers["Authorization"] == "Bearer tok-abc"
            return json_result(201, {"id": 10, "title": "Learn SwiftUI"})

        transport.route("POST", "/login", json_result(200, {"string": "tok-abc"}))
        transport.route("POST", "/todos", post_todo)

        result = await api.login_then_post_todo(
            "user2@example.com", "password2", Todo(title="Learn SwiftUI")
        ).run()

        assert ResultAssertions.assert_success(result) == Todo(id=10, title="Learn SwiftUI")
        assert transport.calls_to("POST", "/todos") == 1

    @pytest.mark.asyncio
    async def test_supplied_todo_is_the_one_posted(
        self, api: TodoApi, transport: StubTransport, codec: JsonPayloadCodec
    ) -> None:
        transport.route("POST", "/login", json_result(200, {"string": "tok"}))
        transport.route("POST", "/todos", json_result(201, {"id": 1, "title": "Learn Composite"}))

        await api.login_then_post_todo("a@b.c", "pw", Todo(title="Learn Composite")).run()

        posted = transport.calls[-1]
        assert codec.decode(posted.body, Todo).value() == Todo(title="Learn Composite")

    @pytest.mark.asyncio
    async def test_login_401_never_posts_todo(self, api: TodoApi, transport: StubTransport) -> None:
        """
        GIVEN login answers 401
        WHEN login_then_post_todo runs
        THEN it returns Failure(STATUS_CODE 401) and POST /todos is never called.
        """
        transport.route("POST", "/login", json_result(401, {"error": "unauthorized"}))
        transport.route("POST", "/todos", json_result(201, {"id": 10, "title": "Learn SwiftUI"}))

        result = await api.login_then_post_todo("user2@example.com", "wrong", Todo(title="Learn SwiftUI")).run()

        ResultAssertions.assert_status_code(result, 401)
        assert transport.calls_to("POST", "/login") == 1
        assert transport.calls_to("POST", "/todos") == 0

    @pytest.mark.asyncio
    async def test_post_todo_failure_is_composite_outcome(self, api: TodoApi, transport: StubTransport) -> None:
        transport.route("POST", "/login", json_result(200, {"string": "tok"}))
        transport.route("POST", "/todos", json_result(422, {"error": "title required"}))

        result = await api.login_then_post_todo("a@b.c", "pw", Todo(title="")).run()

        ResultAssertions.assert_status_code(result, 422)


class TestTodoPipelines:
    @pytest.mark.asyncio
    async def test_login_decodes_token(self, api: TodoApi, transport: StubTransport) -> None:
        transport.route("POST", "/login", json_result(200, {"string": "tok-abc"}))

        result = await api.login("user2@example.com", "password2").run()

        assert result.value() == Token(string="tok-abc")
        assert transport.calls[0].headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_get_todos_decodes_list(self, api: TodoApi, transport: StubTransport) -> None:
        transport.route("GET", "/todos", json_result(200, [{"id": 1, "title": "a"}, {"id": 2, "title": "b"}]))

        result = await api.get_todos("tok").run()

        assert [todo.title for todo in result.value()] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_get_todos_empty_list(self, api: TodoApi, transport: StubTransport) -> None:
        transport.route("GET", "/todos", json_result(200, []))
        assert (await api.get_todos("tok").run()).value() == []

    @pytest.mark.asyncio
    async def test_delete_todo(self, api: TodoApi, transport: StubTransport) -> None:
        transport.route("DELETE", "/todos/10", json_result(200, {"id": 10, "title": "Learn SwiftUI"}))

        result = await api.delete_todo("tok", 10).run()

        assert result.value() == Todo(id=10, title="Learn SwiftUI")

    @pytest.mark.asyncio
    async def test_delete_missing_todo(self, api: TodoApi, transport: StubTransport) -> None:
        transport.route("DELETE", "/todos/99", json_result(404, {"error": "not found"}))
        ResultAssertions.assert_status_code(await api.delete_todo("tok", 99).run(), 404)

    @pytest.mark.asyncio
    async def test_construction_failure_surfaces_without_network(self, codec: JsonPayloadCodec) -> None:
        transport = StubTransport()
        api = TodoApi(RequestBuilder("not a url", codec), transport, codec)

        result = await api.get_todos("tok").run()

        ResultAssertions.assert_failure(result, ErrorKind.INVALID_ENDPOINT)
        assert transport.calls == []


class TestLogging:
    @pytest.mark.asyncio
    async def test_each_operation_is_logged_with_state(self, api: TodoApi, transport: StubTransport) -> None:
        transport.route("GET", "/todos", json_result(503, {}))

        with capture_logs() as logs:
            await api.get_todos("tok").run()

        completed = [entry for entry in logs if entry["event"] == "pipeline.completed"]
        assert completed == [
            {
                "event": "pipeline.completed",
                "log_level": "warning",
                "operation": "get_todos",
                "elapsed_seconds": completed[0]["elapsed_seconds"],
                "state": "FAILURE",
                "failure": completed[0]["failure"],
            }
        ]
        assert "503" in completed[0]["failure"]

    @pytest.mark.asyncio
    async def test_tokens_are_never_logged(self, api: TodoApi, transport: StubTransport) -> None:
        transport.route("POST", "/login", json_result(200, {"string": "secret-token"}))
        transport.route("POST", "/todos", json_result(201, {"id": 1, "title": "x"}))

        with capture_logs() as logs:
            await api.login_then_post_todo("a@b.c", "hunter2", Todo(title="x")).run()

        assert logs
        rendered = repr(logs)
        assert "secret-token" not in rendered
        assert "hunter2" not in rendered
