"""
Success Response Transformer
Wraps handler results in the standard success envelope
"""
from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional

from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse

from api_envelope.api.error_categories import classify_outcome
from api_envelope.api.middleware.correlation_id_middleware import get_request_context
from api_envelope.api.middleware.request_logging import (
    MUTATING_METHODS,
    captured_body,
    get_request_metadata,
    has_content,
    log_slow_request,
    now_ms,
    request_path,
    utc_timestamp,
)
from api_envelope.api.response_models import SuccessEnvelope, SuccessMeta
from api_envelope.i18n.translator import LocaleResolver
from api_envelope.infrastructure.observability.logger import StructuredLogger, get_logger
from api_envelope.utils.client_ip import get_client_ip_info
from api_envelope.utils.masking import mask_sensitive_data

DEFAULT_SUCCESS_MESSAGE = "Request successful"

# Statuses that must not carry a body
_BODYLESS_STATUSES = frozenset({204, 205, 304})


def _item_text(item: Any) -> str:
    if item is None:
        return ""
    if isinstance(item, str):
        return item
    return format_message(item)


def format_message(message: Any) -> str:
    """
    Render a handler-supplied message as a string.

    Sequences join with ", ", scalars stringify, other objects are
    JSON-encoded. Anything that cannot be rendered becomes the default
    success message.
    """
    if message is None:
        return DEFAULT_SUCCESS_MESSAGE
    if isinstance(message, str):
        return message
    if isinstance(message, (list, tuple)):
        return ", ".join(_item_text(item) for item in message)
    if isinstance(message, bool):
        return "true" if message else "false"
    if isinstance(message, (int, float)):
        return str(message)
    try:
        return json.dumps(message)
    except (TypeError, ValueError):
        return DEFAULT_SUCCESS_MESSAGE


def split_message(result: Any) -> tuple[str, Any]:
    """Pull the `message` field out of a mapping result; returns (message, data)."""
    if isinstance(result, Mapping) and "message" in result:
        data = {key: value for key, value in result.items() if key != "message"}
        return format_message(result["message"]), data
    return DEFAULT_SUCCESS_MESSAGE, result


def _is_json(response: Response) -> bool:
    if isinstance(response, StreamingResponse) or getattr(response, "body", None) is None:
        return False
    return response.headers.get("content-type", "").startswith("application/json")


class SuccessTransformer:
    """
    Builds the success envelope and logs the completed request.

    Emits one info entry per request, plus a slow-request warning when the
    request took longer than the threshold.
    """

    def __init__(
        self,
        logger: Optional[StructuredLogger] = None,
        locale_resolver: Optional[LocaleResolver] = None,
        fallback_language: str = "tr",
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._logger = logger or get_logger("http")
        self._locale_resolver = locale_resolver
        self._fallback_language = fallback_language
        self._clock = clock

    def _language(self, request: Request) -> str:
        lang = self._locale_resolver.resolve(request) if self._locale_resolver else None
        return lang or self._fallback_language

    def transform(self, request: Request, result: Any, status_code: int) -> SuccessEnvelope:
        now = self._clock()
        context = get_request_context(request)
        request_id = context.request_id if context else "N/A"
        correlation_id = context.correlation_id if context else request_id
        start_time = context.start_time if context else now
        duration = max(int(now - start_time), 0)

        lang = self._language(request)
        ip_info = get_client_ip_info(request)
        request_meta = get_request_metadata(request)
        path = request_path(request)
        message, data = split_message(result)

        masked_body = None
        if request.method in MUTATING_METHODS:
            body = captured_body(request)
            if has_content(body):
                masked_body = mask_sensitive_data(body)

        log_context: dict[str, Any] = {
            "request_id": request_id,
            "correlation_id": correlation_id,
            "status": status_code,
            "duration": f"{duration}ms",
            "ipv4": ip_info.ipv4,
            "ipv6": ip_info.ipv6,
            **request_meta,
        }
        if masked_body is not None:
            log_context["request_body"] = masked_body

        outcome = classify_outcome(status_code)
        self._logger.info(f"{outcome.label} {request.method} {path}", **log_context)

        log_slow_request(
            self._logger,
            request.method,
            path,
            duration,
            {
                "request_id": request_id,
                "correlation_id": correlation_id,
                "duration": f"{duration}ms",
                **request_meta,
            },
        )

        return SuccessEnvelope(
            status_code=status_code,
            meta=SuccessMeta(
                request_id=request_id,
                correlation_id=correlation_id,
                path=path,
                method=request.method,
                lang=lang,
                ipv4=ip_info.ipv4,
                ipv6=ip_info.ipv6,
                duration=f"{duration}ms",
                message=message,
                timestamp=utc_timestamp(),
            ),
            data=data,
        )

    def wrap_response(self, request: Request, response: Response) -> Response:
        """
        Re-render a JSON endpoint response inside the success envelope.

        Status, headers, cookies and background tasks are preserved.
        Streaming, non-JSON and body-less responses are returned untouched.
        JSON responses with an error status are raised as HTTPException so the
        exception translator answers them with an error envelope.
        """
        if response.status_code in _BODYLESS_STATUSES or response.status_code < 200:
            return response
        if not _is_json(response):
            return response
        try:
            result = json.loads(response.body) if response.body else None
        except ValueError:
            return response

        if response.status_code >= 400:
            headers = {
                key: value
                for key, value in response.headers.items()
                if key not in ("content-length", "content-type")
            }
            raise HTTPException(response.status_code, detail=result, headers=headers or None)

        envelope = self.transform(request, result, response.status_code)
        wrapped = JSONResponse(
            envelope.to_content(),
            status_code=response.status_code,
            background=response.background,
        )
        wrapped.raw_headers.extend(
            (name, value)
            for name, value in response.raw_headers
            if name not in (b"content-length", b"content-type")
        )
        return wrapped
