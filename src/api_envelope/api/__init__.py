"""
API Layer
Response envelopes, error translation, routers and middleware
"""
from api_envelope.api.error_categories import (
    ErrorCategory,
    Outcome,
    categorize_error,
    classify_outcome,
)
from api_envelope.api.exceptions import (
    APIException,
    BusinessRuleViolationException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ServiceUnavailableException,
    TooManyRequestsException,
    UnauthorizedException,
    ValidationException,
)
from api_envelope.api.response_models import (
    ErrorEnvelope,
    ErrorMeta,
    SuccessEnvelope,
    SuccessMeta,
)
from api_envelope.api.middleware import (
    CorrelationIdMiddleware,
    RequestContext,
    get_request_context,
)
from api_envelope.api.transform import SuccessTransformer
from api_envelope.api.error_handlers import (
    ExceptionTranslator,
    register_exception_handlers,
)
from api_envelope.api.base_router import EnvelopeRoute, adopt_route, create_api_router

__all__ = [
    # Categories
    "ErrorCategory",
    "Outcome",
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
    # Response models
    "SuccessEnvelope",
    "SuccessMeta",
    "ErrorEnvelope",
    "ErrorMeta",
    # Middleware
    "CorrelationIdMiddleware",
    "RequestContext",
    "get_request_context",
    # Pipeline
    "SuccessTransformer",
    "ExceptionTranslator",
    "register_exception_handlers",
    # Router
    "EnvelopeRoute",
    "adopt_route",
    "create_api_router",
]
