"""
Centralized API Error Handlers
Maps every exception to the standard error envelope
"""
from __future__ import annotations

import traceback
from typing import Any, Callable, Mapping, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api_envelope.api.error_categories import ErrorCategory, categorize_error, classify_outcome
from api_envelope.api.exceptions import APIException, Message
from api_envelope.api.middleware.correlation_id_middleware import (
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
    get_request_context,
)
from api_envelope.api.middleware.request_logging import (
    captured_body,
    emit,
    get_request_metadata,
    get_system_metadata,
    has_content,
    log_slow_request,
    now_ms,
    request_path,
    utc_timestamp,
)
from api_envelope.api.response_models import ErrorEnvelope, ErrorMeta
from api_envelope.i18n.translator import LocaleResolver, Translator
from api_envelope.infrastructure.observability.logger import StructuredLogger, get_logger
from api_envelope.utils.client_ip import get_client_ip_info
from api_envelope.utils.masking import mask_sensitive_data

GENERIC_ERROR_KEY = "common.INTERNAL_SERVER_ERROR"

_REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


def _coerce_message(value: Any) -> Message:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return [item if isinstance(item, str) else str(item) for item in value]
    return str(value)


def payload_message(payload: Any) -> Message:
    """
    Message carried by a classified failure's response payload.

    Mappings prefer `message`, then `error`, then the literal "Error".
    """
    if isinstance(payload, Mapping):
        value = payload.get("message")
        if value is None:
            value = payload.get("error")
        return _coerce_message("Error" if value is None else value)
    if payload is None:
        return "Error"
    return _coerce_message(payload)


def validation_messages(exc: RequestValidationError) -> list[str]:
    """One "<field> <problem>" string per failed field."""
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(loc) or "general"
        messages.append(f"{field} {error.get('msg', 'is invalid')}")
    return messages


def structure_validation_errors(messages: Sequence[str]) -> dict[str, list[str]]:
    """
    Group flat validation messages by field.

    The field is guessed from the first word of each message:
    ["email must be an email", "password too short"]
    -> {"email": ["email must be an email"], "password": ["password too short"]}

    Multi-word field names end up misattributed.
    """
    errors: dict[str, list[str]] = {}
    for message in messages:
        field = message.split(" ")[0] or "general"
        errors.setdefault(field, []).append(message)
    return errors


def _format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class ExceptionTranslator:
    """
    Terminal error handler for the request pipeline.

    Converts any exception into an ErrorEnvelope response and logs it with a
    severity chosen by status code and category. It never re-raises.
    """

    def __init__(
        self,
        translator: Translator,
        logger: Optional[StructuredLogger] = None,
        locale_resolver: Optional[LocaleResolver] = None,
        fallback_language: str = "en",
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._translator = translator
        self._logger = logger or get_logger("http")
        self._locale_resolver = locale_resolver
        self._fallback_language = fallback_language
        self._clock = clock

    def _language(self, request: Request) -> str:
        lang = self._locale_resolver.resolve(request) if self._locale_resolver else None
        return lang or self._fallback_language

    def resolve_failure(self, exc: BaseException, lang: str) -> tuple[int, Message, str]:
        """Returns (status_code, message, error_name) for `exc`."""
        if isinstance(exc, APIException):
            return exc.status_code, payload_message(exc.response_payload()), type(exc).__name__
        if isinstance(exc, RequestValidationError):
            return status.HTTP_400_BAD_REQUEST, validation_messages(exc), type(exc).__name__
        if isinstance(exc, StarletteHTTPException):
            return exc.status_code, payload_message(exc.detail), type(exc).__name__

        # Raw exception text may leak internals in production
        message = str(exc) or self._translator.translate(GENERIC_ERROR_KEY, lang)
        return status.HTTP_500_INTERNAL_SERVER_ERROR, message, type(exc).__name__

    async def handle(self, request: Request, exc: Exception) -> JSONResponse:
        now = self._clock()
        context = get_request_context(request)
        request_id = context.request_id if context else "N/A"
        correlation_id = context.correlation_id if context else request_id
        duration = max(int(now - context.start_time), 0) if context else 0

        lang = self._language(request)
        ip_info = get_client_ip_info(request)
        request_meta = get_request_metadata(request)
        path = request_path(request)

        status_code, message, error_name = self.resolve_failure(exc, lang)
        message_text = ", ".join(message) if isinstance(message, list) else message
        category = categorize_error(status_code, message_text)
        errors = (
            structure_validation_errors(message)
            if category is ErrorCategory.VALIDATION and isinstance(message, list)
            else None
        )

        envelope = ErrorEnvelope(
            status_code=status_code,
            meta=ErrorMeta(
                request_id=request_id,
                correlation_id=correlation_id,
                path=path,
                method=request.method,
                lang=lang,
                error_category=category,
                message=message,
                timestamp=utc_timestamp(),
                ipv4=ip_info.ipv4,
                ipv6=ip_info.ipv6,
                errors=errors,
            ),
        )

        log_context: dict[str, Any] = {
            "request_id": request_id,
            "correlation_id": correlation_id,
            "status": status_code,
            "error_category": category.value,
            "error_name": error_name,
            "duration": f"{duration}ms",
            "lang": lang,
            "message": message_text,
            **request_meta,
            "ipv4": ip_info.ipv4,
            "ipv6": ip_info.ipv6,
        }
        body = captured_body(request)
        if has_content(body):
            log_context["request_body"] = mask_sensitive_data(body)
        log_context.update(get_system_metadata())

        outcome = classify_outcome(status_code, category)
        entry = dict(log_context)
        if status_code >= 500:
            entry["stack"] = _format_stack(exc)
        if outcome.alert:
            entry[outcome.alert] = True
        emit(self._logger, outcome.level, f"{outcome.label} {request.method} {path}", entry)

        log_slow_request(self._logger, request.method, path, duration, log_context)

        headers: dict[str, str] = {}
        if isinstance(exc, StarletteHTTPException) and exc.headers:
            headers.update(exc.headers)
        # Responses from Starlette's outermost error middleware skip the correlation middleware
        if context:
            headers[REQUEST_ID_HEADER] = request_id
            headers[CORRELATION_ID_HEADER] = correlation_id

        return JSONResponse(envelope.to_content(), status_code=status_code, headers=headers)


def register_exception_handlers(app: FastAPI, translator: ExceptionTranslator) -> None:
    """Route every failure, including FastAPI's own HTTP and validation errors, to `translator`."""
    app.add_exception_handler(StarletteHTTPException, translator.handle)
    app.add_exception_handler(RequestValidationError, translator.handle)
    app.add_exception_handler(Exception, translator.handle)
