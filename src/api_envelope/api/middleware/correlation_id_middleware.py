"""
Correlation ID Middleware
Assigns request and correlation IDs for distributed tracing
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from api_envelope.api.middleware.request_logging import now_ms
from api_envelope.infrastructure.observability.logger import bind_context, clear_context

CORRELATION_ID_HEADER = "x-correlation-id"
REQUEST_ID_HEADER = "x-request-id"


@dataclass(frozen=True)
class RequestContext:
    """
    Per-request tracing state.

    Attributes:
        request_id: Generated fresh for every request
        correlation_id: Inbound trace ID, or request_id when none was sent
        start_time: Milliseconds timestamp taken before any handler runs
    """

    request_id: str
    correlation_id: str
    start_time: float


def resolve_correlation_id(inbound: Union[str, Sequence[str], None], request_id: str) -> str:
    if isinstance(inbound, str):
        return inbound if inbound.strip() else request_id
    if inbound:
        first = inbound[0]
        if isinstance(first, str) and first.strip():
            return first
    return request_id


def _inbound_values(request: Request, header: str) -> list[str]:
    return [value for value in request.headers.getlist(header) if value.strip()]


def get_request_context(request: Request) -> Optional[RequestContext]:
    return getattr(request.state, "request_context", None)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to stamp request/correlation IDs and start time on every request.

    Accepts an upstream X-Correlation-ID (or legacy X-Request-ID) and echoes
    both identifiers back in the response headers. Must run before the
    success transformer and exception translator, which read the stamped
    RequestContext.
    """

    def __init__(self, app: ASGIApp, clock: Callable[[], float] = now_ms) -> None:
        super().__init__(app)
        self._clock = clock

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = str(uuid4())
        inbound = _inbound_values(request, CORRELATION_ID_HEADER) or _inbound_values(
            request, REQUEST_ID_HEADER
        )
        context = RequestContext(
            request_id=request_id,
            correlation_id=resolve_correlation_id(inbound, request_id),
            start_time=self._clock(),
        )
        request.state.request_context = context

        bind_context(
            request_id=context.request_id,
            correlation_id=context.correlation_id,
        )
        try:
            response = await call_next(request)
        finally:
            clear_context()

        response.headers[REQUEST_ID_HEADER] = context.request_id
        response.headers[CORRELATION_ID_HEADER] = context.correlation_id
        return response
