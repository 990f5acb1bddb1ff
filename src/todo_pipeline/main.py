"""
Composition root — wires settings, adapters and pipelines together.

This is the ONLY place where concrete adapters are instantiated.
Everything else depends on the Transport and PayloadDecoder protocols.

    async with httpx.AsyncClient() as client:
        api = create_api(AppSettings(), client)
        todo = await api.login_then_post_todo(email, password, Todo(title="Learn SwiftUI")).run()
"""

from __future__ import annotations

import logging

import httpx
import structlog

from todo_pipeline.adapters.http_transport import HttpxTransport
from todo_pipeline.adapters.json_codec import JsonPayloadCodec
from todo_pipeline.api import TodoApi
from todo_pipeline.config import AppSettings
from todo_pipeline.request_builder import RequestBuilder


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for structured, human-readable console logging.

    Unknown level names fall back to INFO.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_api(settings: AppSettings, client: httpx.AsyncClient) -> TodoApi:
    """
    Build a TodoApi from settings.

    The httpx client is owned by the caller, who is responsible for closing it.
    """
    codec = JsonPayloadCodec()
    builder = RequestBuilder(
        base_url=settings.api.base_url,
        encoder=codec,
        timeout=settings.api.timeout_seconds,
    )
    return TodoApi(builder=builder, transport=HttpxTransport(client), decoder=codec)
