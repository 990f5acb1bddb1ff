"""
Domain models — immutable values flowing through the request pipeline.

Two families live here:

  Wire shapes (what the backend speaks):
    User, CreateUserResponse, Token, Todo

  Pipeline plumbing (what the stages hand each other):
    RequestDescriptor  — built by the request builder, consumed by the transport
    RawResult          — produced by the transport, consumed by the validator

All models are frozen dataclasses. Field names of the wire shapes match the
JSON keys exactly (verifyPassword included), so the codec needs no aliases.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


# ─────────────────────── Wire shapes ───────────────────────


@dataclass(frozen=True, slots=True)
class User:
    """Registration payload for POST /users."""

    name: str
    email: str
    password: str = field(repr=False)
    verifyPassword: str = field(repr=False)  # noqa: N815

    @staticmethod
    def with_id(user_id: int) -> User:
        """Generate a predictable test user: user{n}, user{n}@example.com, password{n}."""
        return User(
            name=f"user{user_id}",
            email=f"user{user_id}@example.com",
            password=f"password{user_id}",
            verifyPassword=f"password{user_id}",
        )


@dataclass(frozen=True, slots=True)
class CreateUserResponse:
    id: int
    email: str
    name: str


@dataclass(frozen=True, slots=True)
class Token:
    """Bearer credential returned by POST /login. Never persisted."""

    string: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class Todo:
    """A todo item. `id` is None until the server assigns one."""

    title: str
    id: int | None = None


# ─────────────────────── Pipeline plumbing ───────────────────────


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """
    Everything a transport needs to perform one HTTP call.

    `target` is always an absolute URI (base URL + resource path); the
    builder refuses to produce a descriptor otherwise. `headers` is
    exposed read-only. `timeout` is the caller's deadline in seconds,
    honoured by the transport.
    """

    method: HttpMethod
    target: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = field(default=None, repr=False)
    timeout: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


@dataclass(frozen=True, slots=True)
class RawResult:
    """
    Raw transport output: status, headers and body bytes.

    Owned by the pipeline step that receives it. Status interpretation
    belongs to the response validator alone.
    """

    status_code: int
    body: bytes = field(default=b"", repr=False)
    headers: Mapping[str, str] = field(default_factory=dict)
