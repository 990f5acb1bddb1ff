"""
TodoApi — the concrete pipelines of the users/login/todos backend.

Each method returns a cold Pipeline; nothing is sent until the caller
awaits run() or subscribes. Descriptors are built when the method is
called, so construction errors (INVALID_BODY, INVALID_ENDPOINT) are part
of the pipeline's outcome without any network access.

  create_user            POST /users      → CreateUserResponse
  login                  POST /login      → Token        (Basic auth)
  post_todo              POST /todos      → Todo         (Bearer auth)
  get_todos              GET /todos       → list[Todo]   (Bearer auth)
  delete_todo            DELETE /todos/id → Todo         (Bearer auth)
  login_then_post_todo   login ──chain──→ post_todo(token.string, todo)
"""

from __future__ import annotations

from todo_pipeline.domain.models import CreateUserResponse, RequestDescriptor, Todo, Token, User
from todo_pipeline.domain.ports import PayloadDecoder, Transport
from todo_pipeline.execution import LoggingExecutionContext
from todo_pipeline.pipeline import Pipeline
from todo_pipeline.request_builder import RequestBuilder
from todo_pipeline.result import Result


class TodoApi:
    """
    Pipelines for the todo backend, wired to one builder, transport and decoder.

    Holds no mutable state, so pipelines from one TodoApi may run concurrently.
    """

    def __init__(
        self,
        builder: RequestBuilder,
        transport: Transport,
        decoder: PayloadDecoder,
    ) -> None:
        self._builder = builder
        self._transport = transport
        self._decoder = decoder

    @property
    def builder(self) -> RequestBuilder:
        return self._builder

    def create_user(self, user: User) -> Pipeline[CreateUserResponse]:
        return self._pipeline("create_user", self._builder.create_user(user), CreateUserResponse)

    def login(self, email: str, password: str) -> Pipeline[Token]:
        return self._pipeline("login", self._builder.login(email, password), Token)

    def post_todo(self, auth_token: str, todo: Todo) -> Pipeline[Todo]:
        return self._pipeline("post_todo", self._builder.post_todo(auth_token, todo), Todo)

    def get_todos(self, auth_token: str) -> Pipeline[list[Todo]]:
        return self._pipeline("get_todos", self._builder.get_todos(auth_token), list[Todo])

    def delete_todo(self, auth_token: str, todo_id: int) -> Pipeline[Todo]:
        return self._pipeline("delete_todo", self._builder.delete_todo(auth_token, todo_id), Todo)

    def login_then_post_todo(self, email: str, password: str, todo: Todo) -> Pipeline[Todo]:
        """
        Log in, then post `todo` with the bearer token from the login response.

        If login fails, the composite fails with login's error and the todo
        request is never built or sent.
        """
        return (
            self.login(email, password)
            .map(lambda token: token.string)
            .flat_map(lambda auth_token: self.post_todo(auth_token, todo), name="login_then_post_todo")
            .within(LoggingExecutionContext(operation="login_then_post_todo"))
        )

    def _pipeline(self, operation: str, request: Result[RequestDescriptor], shape: object) -> Pipeline:
        return Pipeline.request(request, self._transport, self._decoder, shape, name=operation).within(
            LoggingExecutionContext(operation=operation)
        )
