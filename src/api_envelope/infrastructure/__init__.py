"""
Infrastructure Layer
Observability
"""
from api_envelope.infrastructure.observability import (
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
