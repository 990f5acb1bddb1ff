"""
JSON codec adapter — pydantic TypeAdapter over the domain dataclasses.

Adapter layer — implements the PayloadEncoder and PayloadDecoder ports.

Decoding validates the whole structure against the requested shape
(CreateUserResponse, Token, Todo, list[Todo], ...) in strict mode, so a
JSON value of the wrong type ("10" for an int id) is rejected rather than
coerced. Encoding leaves out fields whose value is None. Validation errors are
captured into Result failures with pydantic's diagnostic text, so the
engine can tell "the server answered with the wrong shape" apart from
"the call itself failed".
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar, get_origin

import structlog
from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from todo_pipeline.failure import ErrorKind
from todo_pipeline.result import Result

T = TypeVar("T")

log = structlog.get_logger()


@lru_cache(maxsize=64)
def _adapter_for(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


class JsonPayloadCodec:
    """
    Encode domain values to JSON bytes and decode JSON bytes into shapes.

    Implements both PayloadEncoder and PayloadDecoder.
    """

    def encode(self, value: Any) -> bytes:
        """Serialize a domain value. Raises on unserializable input."""
        return _adapter_for(type(value)).dump_json(value, exclude_none=True)

    def decode(self, payload: bytes, shape: type[T]) -> Result[T]:
        """
        Parse and validate `payload` as `shape`.

        Returns Result.failure(DECODE_FAILURE, ...) on malformed JSON, a
        structural mismatch, a JSON null, or a shape that cannot be
        validated at all; never raises.
        """
        try:
            value: T = _adapter_for(shape).validate_json(payload, strict=True)
        except ValidationError as e:
            log.warning("decode.failed", shape=_shape_name(shape), errors=e.error_count())
            return Result.failure(
                ErrorKind.DECODE_FAILURE,
                f"Response does not match {_shape_name(shape)}: {e}",
                e,
            )
        except (PydanticSchemaGenerationError, TypeError) as e:
            log.warning("decode.unsupported_shape", shape=_shape_name(shape), error=str(e))
            return Result.failure(
                ErrorKind.DECODE_FAILURE,
                f"Cannot decode into {_shape_name(shape)}: {e}",
                e,
            )
        if value is None:
            log.warning("decode.failed", shape=_shape_name(shape), errors=0)
            return Result.failure(ErrorKind.DECODE_FAILURE, f"Response for {_shape_name(shape)} is null")
        return Result.success(value)


def _shape_name(shape: Any) -> str:
    # list[Todo].__name__ is just "list"
    if get_origin(shape) is not None:
        return str(shape)
    return getattr(shape, "__name__", str(shape))
