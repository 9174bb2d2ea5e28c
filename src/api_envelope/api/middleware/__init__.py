"""
API Middleware
Correlation IDs and request log enrichment
"""
from api_envelope.api.middleware.correlation_id_middleware import (
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
    CorrelationIdMiddleware,
    RequestContext,
    get_request_context,
    resolve_correlation_id,
)
from api_envelope.api.middleware.request_logging import SLOW_REQUEST_THRESHOLD_MS

__all__ = [
    "CORRELATION_ID_HEADER",
    "REQUEST_ID_HEADER",
    "SLOW_REQUEST_THRESHOLD_MS",
    "CorrelationIdMiddleware",
    "RequestContext",
    "get_request_context",
    "resolve_correlation_id",
]
