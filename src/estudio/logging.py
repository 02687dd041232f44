"""
structlog setup for Estudio.

Every log event carries the HTTP request id and the forwarded caller id when
it was emitted while serving a request. Provider credentials are stripped
from events before rendering.
"""

import logging
import secrets
import sys
from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
caller_id_ctx: ContextVar[str | None] = ContextVar("caller_id", default=None)

CALLER_ID_HEADER = "x-caller-id"

# Event keys that may hold a provider key
CREDENTIAL_FIELDS = frozenset({"credential", "api_key", "authorization", "headers"})


def add_request_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Attach the current request and caller ids to an event."""
    _ = logger, method_name
    request_id = request_id_ctx.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    caller_id = caller_id_ctx.get()
    if caller_id:
        event_dict.setdefault("caller_id", caller_id)
    return event_dict


def drop_credentials(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Redact credential-bearing fields passed to a log call by mistake."""
    _ = logger, method_name
    for field in CREDENTIAL_FIELDS.intersection(event_dict):
        event_dict[field] = "[REDACTED]"
    return event_dict


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Route structlog through stdlib logging on stdout.

    Debug mode renders colored console lines; otherwise each event is one JSON
    object. ``log_level`` overrides the level implied by ``debug``.
    """
    level = logging.DEBUG if debug else logging.INFO
    if log_level:
        named = logging.getLevelName(log_level.upper())
        if isinstance(named, int):
            level = named

    logging.basicConfig(level=level, stream=sys.stdout, format="%(message)s", force=True)
    # httpx logs every provider URL at INFO, query strings included
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    renderer = (
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            drop_credentials,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def new_request_id() -> str:
    """Random 16-character hex id for requests that arrive without one."""
    return secrets.token_hex(8)


def set_request_context(request_id: str | None = None, caller_id: str | None = None) -> str:
    """Bind the ids for the current request and return the request id in use."""
    request_id = request_id or new_request_id()
    request_id_ctx.set(request_id)
    caller_id_ctx.set(caller_id)
    return request_id


def clear_request_context() -> None:
    request_id_ctx.set(None)
    caller_id_ctx.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()


def caller_id_from_headers(headers: Mapping[str, str]) -> str | None:
    """The caller identity forwarded by the authenticating proxy, if any."""
    caller_id = (headers.get(CALLER_ID_HEADER) or "").strip()
    return caller_id or None
