"""
Request builder — pure construction of RequestDescriptors.

Turns domain inputs (users, credentials, todos, tokens) into immutable
request descriptors. No I/O: building never touches the network, so a
caller can check its inputs cheaply before any request is sent.

Every build returns Result[RequestDescriptor]:
  - INVALID_BODY      when the payload cannot be encoded
  - INVALID_ENDPOINT  when base URL + path is not an absolute http(s) URI

Header set per call:
  Content-Type: application/json
  cache-control: no-cache
  Authorization: Basic base64(email:password)   (login)
  Authorization: Bearer <token>                 (todo calls)
"""

from __future__ import annotations

import base64
from typing import Any

import httpx
import structlog

from todo_pipeline.domain.models import HttpMethod, RequestDescriptor, Todo, User
from todo_pipeline.domain.ports import PayloadEncoder
from todo_pipeline.failure import ErrorKind
from todo_pipeline.result import Result

log = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 10.0

_BASE_HEADERS = {
    "Content-Type": "application/json",
    "cache-control": "no-cache",
}


class RequestBuilder:
    """
    Build descriptors for the users/login/todos API under a fixed base URL.

    The base URL and timeout are fixed at construction and never change.
    """

    def __init__(
        self,
        base_url: str,
        encoder: PayloadEncoder,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url
        self._encoder = encoder
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    # ─────────────────────── Users / login ───────────────────────

    def create_user(self, user: User) -> Result[RequestDescriptor]:
        """POST /users with the JSON-encoded user."""
        return self._build(HttpMethod.POST, "/users", body=user)

    def login(self, email: str, password: str) -> Result[RequestDescriptor]:
        """POST /login authenticated with Basic credentials; no body."""
        return self._build(
            HttpMethod.POST,
            "/login",
            authorization=f"Basic {basic_credentials(email, password)}",
        )

    # ─────────────────────── Todos (Bearer) ───────────────────────

    def post_todo(self, auth_token: str, todo: Todo) -> Result[RequestDescriptor]:
        return self._build(HttpMethod.POST, "/todos", body=todo, authorization=f"Bearer {auth_token}")

    def get_todos(self, auth_token: str) -> Result[RequestDescriptor]:
        return self._build(HttpMethod.GET, "/todos", authorization=f"Bearer {auth_token}")

    def delete_todo(self, auth_token: str, todo_id: int) -> Result[RequestDescriptor]:
        """DELETE /todos/<id>; an id that is not an int (e.g. an unsaved Todo's None) is INVALID_ENDPOINT."""
        if not isinstance(todo_id, int) or isinstance(todo_id, bool):
            return Result.failure(ErrorKind.INVALID_ENDPOINT, f"Todo id must be an int, got {todo_id!r}")
        return self._build(HttpMethod.DELETE, f"/todos/{todo_id}", authorization=f"Bearer {auth_token}")

    # ─────────────────────── Internals ───────────────────────

    def _build(
        self,
        method: HttpMethod,
        path: str,
        body: Any = None,
        authorization: str | None = None,
    ) -> Result[RequestDescriptor]:
        headers = dict(_BASE_HEADERS)
        if authorization is not None:
            headers["Authorization"] = authorization

        return (
            self._encode(body)
            .flat_map(
                lambda payload: self._compose_target(path).map(
                    lambda target: RequestDescriptor(
                        method=method,
                        target=target,
                        headers=headers,
                        body=payload or None,  # b"" means no body
                        timeout=self._timeout,
                    )
                )
            )
            .peek(lambda request: log.debug("request.built", method=request.method.value, target=request.target))
        )

    def _encode(self, body: Any) -> Result[bytes]:
        if body is None:
            return Result.success(b"")
        return Result.from_computation(
            lambda: self._encoder.encode(body),
            ErrorKind.INVALID_BODY,
            f"Cannot encode {type(body).__name__} body",
        )

    def _compose_target(self, path: str) -> Result[str]:
        return Result.from_computation(
            lambda: absolute_url(self._base_url + path),
            ErrorKind.INVALID_ENDPOINT,
            f"Cannot compose endpoint for {path!r}",
        )


def basic_credentials(email: str, password: str) -> str:
    """base64("email:password") as used by the Basic authorization scheme."""
    return base64.b64encode(f"{email}:{password}".encode("utf-8")).decode("ascii")


def absolute_url(raw: str) -> str:
    """
    Return `raw` unchanged if it is an absolute http(s) URL with a host.

    Raises httpx.InvalidURL or ValueError otherwise.
    """
    url = httpx.URL(raw)
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"Not an absolute http(s) URL: {raw!r}")
    return raw
