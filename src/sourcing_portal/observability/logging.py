"""
sourcing_portal.observability.logging

structlog setup for the sourcing portal.

Responsibilities:
- Emit one JSON object per event, stamped with the service name and UTC time.
- Keep credentials (passwords, tokens, auth headers) out of log output.
- Hand out bound loggers to the other layers.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

import structlog

# Event keys whose values must never reach a log sink.
SENSITIVE_KEYS = frozenset({"password", "password_hash", "token", "authorization", "jwt_secret"})

_Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]


def configure_logging(*, service_name: str, level: str) -> None:
    """
    Route structlog through stdlib logging at `level` and render JSON to stdout.

    Safe to call more than once (every app built in the test suite calls it); the stdlib
    root handler is only installed the first time.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            stamp_service(service_name),
            redact_sensitive,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def stamp_service(service_name: str) -> _Processor:
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def redact_sensitive(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
