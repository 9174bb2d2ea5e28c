"""
Classified API Exceptions
Failures that carry their own HTTP status and response payload
"""
from __future__ import annotations

from http import HTTPStatus
from typing import Any, Optional, Union

from fastapi import status

Message = Union[str, list[str]]


class APIException(Exception):
    """
    Base exception for API errors.

    Attributes:
        message: Error message, or one message per failed field
        status_code: HTTP status code
        error: Short error name (defaults to the HTTP reason phrase)
    """

    def __init__(
        self,
        message: Message,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error: Optional[str] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error = error or _reason_phrase(status_code)
        super().__init__(message if isinstance(message, str) else ", ".join(message))

    def response_payload(self) -> dict[str, Any]:
        return {"message": self.message, "error": self.error}


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


class ValidationException(APIException):
    """Raised when input validation fails."""

    def __init__(self, message: Message) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class UnauthorizedException(APIException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


class ForbiddenException(APIException):
    """Raised when user lacks permissions."""

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class NotFoundException(APIException):
    """Raised when requested resource not found."""

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(
            f"{resource} not found: {identifier}",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class ConflictException(APIException):
    """Raised when operation conflicts with existing state."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class BusinessRuleViolationException(APIException):
    """Raised when business rule violated."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=422)


class TooManyRequestsException(APIException):
    def __init__(self, message: str = "Too many requests") -> None:
        super().__init__(message, status_code=status.HTTP_429_TOO_MANY_REQUESTS)


class ServiceUnavailableException(APIException):
    def __init__(self, message: str = "Service unavailable") -> None:
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
