"""
Standard API Response Models
Consistent envelope structure across all endpoints
"""
from __future__ import annotations

from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from api_envelope.api.error_categories import ErrorCategory

T = TypeVar("T")

_ENVELOPE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class SuccessMeta(BaseModel):
    """
    Request context attached to every success response.

    Attributes:
        request_id: Unique identifier for this request
        correlation_id: Trace ID for distributed tracing
        duration: Processing time rendered as "<n>ms"
        message: Success message extracted from the handler result
        timestamp: ISO-8601 UTC time the envelope was built
    """

    model_config = _ENVELOPE_CONFIG

    request_id: str
    correlation_id: str
    path: str
    method: str
    lang: str
    ipv4: str
    ipv6: str
    duration: str
    message: str
    timestamp: str


class SuccessEnvelope(BaseModel, Generic[T]):
    """
    Standard success response wrapper.

    Attributes:
        success: Always True for success responses
        status_code: HTTP status code
        meta: Request metadata
        data: Response payload (handler result without its message field)
    """

    model_config = _ENVELOPE_CONFIG

    success: bool = Field(True, description="Indicates successful operation")
    status_code: int
    meta: SuccessMeta
    data: T

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ErrorMeta(BaseModel):
    """
    Request context attached to every error response.

    `errors` is only set for VALIDATION failures carrying a list of messages.
    """

    model_config = _ENVELOPE_CONFIG

    request_id: str
    correlation_id: str
    path: str
    method: str
    lang: str
    error_category: ErrorCategory
    message: Union[str, list[str]]
    timestamp: str
    ipv4: str
    ipv6: str
    errors: dict[str, list[str]] | None = None


class ErrorEnvelope(BaseModel):
    """
    Standard error response wrapper.

    Always returned for error cases (4xx, 5xx).
    """

    model_config = _ENVELOPE_CONFIG

    success: bool = Field(False, description="Always False for errors")
    status_code: int
    meta: ErrorMeta

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
