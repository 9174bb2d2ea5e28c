"""
Error categories and status classification
Groups failures for analytics, alerting and log filtering
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional


class ErrorCategory(str, Enum):
    """Closed set of error categories attached to error envelopes and logs."""

    VALIDATION = "VALIDATION"
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    NOT_FOUND = "NOT_FOUND"
    DATABASE = "DATABASE"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    RATE_LIMIT = "RATE_LIMIT"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


_STATUS_CATEGORIES: dict[int, ErrorCategory] = {
    400: ErrorCategory.VALIDATION,
    401: ErrorCategory.AUTHENTICATION,
    403: ErrorCategory.AUTHORIZATION,
    404: ErrorCategory.NOT_FOUND,
    429: ErrorCategory.RATE_LIMIT,
    422: ErrorCategory.BUSINESS_LOGIC,
}

_DATABASE_HINTS = ("database", "sqlalchemy", "prisma", "sql", "connection")
_EXTERNAL_HINTS = ("timeout", "external service", "third-party", "upstream")


def categorize_error(status_code: int, message: Optional[str] = None) -> ErrorCategory:
    """
    Map a status code (and, for 5xx, the message text) to an ErrorCategory.

    Exact status matches win; 5xx messages are then sniffed for database or
    external-service hints; remaining 4xx fall back to VALIDATION and 5xx to
    INTERNAL.
    """
    category = _STATUS_CATEGORIES.get(status_code)
    if category is not None:
        return category

    if status_code >= 500 and message:
        lowered = message.lower()
        if any(hint in lowered for hint in _DATABASE_HINTS):
            return ErrorCategory.DATABASE
        if any(hint in lowered for hint in _EXTERNAL_HINTS):
            return ErrorCategory.EXTERNAL_SERVICE

    if 400 <= status_code < 500:
        return ErrorCategory.VALIDATION
    if status_code >= 500:
        return ErrorCategory.INTERNAL
    return ErrorCategory.UNKNOWN


LogLevel = Literal["info", "warning", "error"]


@dataclass(frozen=True)
class Outcome:
    """How a finished request is presented in the logs."""

    label: str
    level: LogLevel
    alert: Optional[str] = None


def classify_outcome(status_code: int, category: Optional[ErrorCategory] = None) -> Outcome:
    """
    Single status -> (label, log level, alert flag) decision tree.

    `category` is None on the success path.
    """
    if status_code >= 500:
        return Outcome("🆘 CRITICAL ERROR", "error")
    if status_code == 404:
        return Outcome("🔍 NOT FOUND", "warning")
    if status_code == 401:
        return Outcome("🔐 UNAUTHORIZED", "warning", "security_alert")
    if status_code == 403:
        return Outcome("🚫 FORBIDDEN", "warning", "security_alert")
    if status_code == 429:
        return Outcome("⏳ RATE LIMITED", "warning", "rate_limit_alert")
    if status_code >= 400:
        # Validation failures are expected traffic
        if category is ErrorCategory.VALIDATION:
            return Outcome("⚠️ CLIENT ERROR", "info")
        return Outcome("⚠️ CLIENT ERROR", "warning")
    if category is None:
        return Outcome("✅ SUCCESS", "info")
    return Outcome("❓ UNKNOWN", "info")
