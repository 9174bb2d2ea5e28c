"""
API Envelope
Uniform success/error envelopes, correlation IDs and request logging for FastAPI
"""

from api_envelope.api import (
    APIException,
    BusinessRuleViolationException,
    ConflictException,
    CorrelationIdMiddleware,
    EnvelopeRoute,
    ErrorCategory,
    ErrorEnvelope,
    ExceptionTranslator,
    ForbiddenException,
    NotFoundException,
    RequestContext,
    ServiceUnavailableException,
    SuccessEnvelope,
    SuccessTransformer,
    TooManyRequestsException,
    UnauthorizedException,
    ValidationException,
    categorize_error,
    classify_outcome,
    create_api_router,
    register_exception_handlers,
)
from api_envelope.app import create_app
from api_envelope.config import Settings, get_settings
from api_envelope.i18n import LocaleResolver, Translator
from api_envelope.infrastructure.observability import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from api_envelope.utils.client_ip import IpInfo, resolve_client_ip
from api_envelope.utils.masking import mask_email, mask_sensitive_data, partial_mask

__all__ = [
    # App
    "create_app",
    "Settings",
    "get_settings",
    # Pipeline
    "CorrelationIdMiddleware",
    "RequestContext",
    "SuccessTransformer",
    "ExceptionTranslator",
    "register_exception_handlers",
    "EnvelopeRoute",
    "create_api_router",
    # Envelopes and categories
    "SuccessEnvelope",
    "ErrorEnvelope",
    "ErrorCategory",
    "categorize_error",
    "classify_outcome",
    # Exceptions
    "APIException",
    "ValidationException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "BusinessRuleViolationException",
    "TooManyRequestsException",
    "ServiceUnavailableException",
    # Localization
    "Translator",
    "LocaleResolver",
    # Observability
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Utilities
    "IpInfo",
    "resolve_client_ip",
    "mask_sensitive_data",
    "partial_mask",
    "mask_email",
]
