"""
Observability Infrastructure
Structured logging
"""
from api_envelope.infrastructure.observability.logger import (
    StructuredLogger,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
