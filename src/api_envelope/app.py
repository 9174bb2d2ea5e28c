"""
FastAPI application factory wiring the response pipeline.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from fastapi import FastAPI, Request

from api_envelope.api.base_router import EnvelopeRoute, adopt_route, create_api_router
from api_envelope.api.error_handlers import ExceptionTranslator, register_exception_handlers
from api_envelope.api.middleware.correlation_id_middleware import CorrelationIdMiddleware
from api_envelope.api.middleware.request_logging import now_ms
from api_envelope.api.transform import SuccessTransformer
from api_envelope.config import Settings, get_settings
from api_envelope.i18n.translator import LocaleResolver, Translator
from api_envelope.infrastructure.observability.logger import (
    StructuredLogger,
    configure_logging,
    get_logger,
)


class EnvelopeAPI(FastAPI):
    """FastAPI app that envelopes routes from any included router, whatever its route class."""

    def include_router(self, router: Any, *args: Any, **kwargs: Any) -> None:
        super().include_router(router, *args, **kwargs)
        for route in self.router.routes:
            adopt_route(route)


def _register_routes(app: FastAPI, translator: Translator, resolver: LocaleResolver) -> None:
    router = create_api_router(prefix="", tags=["system"])

    @router.get("/")
    async def hello(request: Request) -> dict:
        lang = resolver.resolve(request) or translator.fallback_language
        return {"message": translator.translate("common.HELLO", lang)}

    @router.get("/health")
    async def health() -> dict:
        return {"message": "ok", "status": "healthy"}

    app.include_router(router)


def create_app(
    settings: Optional[Settings] = None,
    *,
    logger: Optional[StructuredLogger] = None,
    translator: Optional[Translator] = None,
    clock: Optional[Callable[[], float]] = None,
) -> FastAPI:
    """
    Build the API with correlation IDs, success envelopes and error translation.

    `logger`, `translator` and `clock` are injectable for tests.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=bool(settings.json_logs))

    logger = logger or get_logger("http")
    clock = clock or now_ms
    translator = translator or Translator(settings.i18n_path, settings.fallback_language)
    resolver = LocaleResolver(translator.languages)

    app = EnvelopeAPI(title=settings.app_name, version="1.0.0")
    app.router.route_class = EnvelopeRoute

    app.state.success_transformer = SuccessTransformer(
        logger=logger,
        locale_resolver=resolver,
        fallback_language=settings.fallback_language,
        clock=clock,
    )
    app.state.exception_translator = ExceptionTranslator(
        translator,
        logger=logger,
        locale_resolver=resolver,
        fallback_language=settings.error_fallback_language,
        clock=clock,
    )
    register_exception_handlers(app, app.state.exception_translator)

    # Added last so it wraps everything else and stamps the request first
    app.add_middleware(CorrelationIdMiddleware, clock=clock)

    _register_routes(app, translator, resolver)
    return app
