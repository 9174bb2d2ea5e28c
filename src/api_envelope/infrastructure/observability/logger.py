"""
Structured Logging
structlog setup for the request pipeline, with secrets masked before rendering
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Protocol

import structlog

from api_envelope.utils.masking import MaskingProcessor

# uvicorn's access log duplicates the per-request entries written by the pipeline
_SILENCED_LOGGERS = ("uvicorn.access",)


class StructuredLogger(Protocol):
    """
    Logging seam injected into the response pipeline.

    Satisfied by structlog bound loggers and by simple test doubles.
    """

    def info(self, event: str, **context: Any) -> Any: ...

    def warning(self, event: str, **context: Any) -> Any: ...

    def error(self, event: str, **context: Any) -> Any: ...


def build_processors(json_logs: bool) -> list[Any]:
    """
    Processor chain for request logs.

    Request-scoped ids come from contextvars; masking runs last so nothing
    added by earlier processors reaches the renderer unmasked.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        MaskingProcessor(),
    ]
    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    processors.append(renderer)
    return processors


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Route structlog through stdlib logging at `log_level`.

    JSON lines in production, colored console output in development.
    """
    level = logging.getLevelName(log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in _SILENCED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Replace the request-scoped log context (request_id, correlation_id)."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
