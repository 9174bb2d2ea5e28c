"""
Base FastAPI Router
Routes whose JSON responses are wrapped in the success envelope
"""
from __future__ import annotations

from typing import Any, Callable, Coroutine, Sequence

from fastapi import APIRouter, Request
from fastapi.routing import APIRoute, request_response
from starlette.responses import Response
from starlette.routing import BaseRoute

from api_envelope.api.middleware.request_logging import read_json_body
from api_envelope.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

RouteHandler = Callable[[Request], Coroutine[Any, Any, Response]]


def envelope_handler(handler: RouteHandler) -> RouteHandler:
    """
    Wrap a route handler so its response goes through the app's SuccessTransformer.

    The JSON request body is captured on request.state before the endpoint
    runs so both the success and error paths can log a masked copy.
    """

    async def handle(request: Request) -> Response:
        await read_json_body(request)
        response = await handler(request)
        transformer = getattr(request.app.state, "success_transformer", None)
        if transformer is None:
            return response
        return transformer.wrap_response(request, response)

    return handle


class EnvelopeRoute(APIRoute):
    """APIRoute that hands every endpoint response to the app's SuccessTransformer."""

    def get_route_handler(self) -> RouteHandler:
        return envelope_handler(super().get_route_handler())


def adopt_route(route: BaseRoute) -> bool:
    """
    Put an APIRoute declared with any other route class behind the envelope.

    Routers keep their own route class when included, so routes from a plain
    APIRouter need their ASGI app rebuilt. Returns True if the route changed.
    """
    if not isinstance(route, APIRoute) or isinstance(route, EnvelopeRoute):
        return False
    if getattr(route, "enveloped", False):
        return False
    route.app = request_response(envelope_handler(route.get_route_handler()))
    route.enveloped = True
    return True


def create_api_router(
    prefix: str,
    tags: Sequence[str],
    include_in_schema: bool = True,
) -> APIRouter:
    """
    Create a router whose endpoints return enveloped responses.

    Args:
        prefix: Route prefix (e.g., "/api/v1/users")
        tags: OpenAPI tags for grouping
        include_in_schema: Whether to include in OpenAPI schema

    Returns:
        Configured APIRouter instance

    Example:
        router = create_api_router(
            prefix="/api/v1/auth",
            tags=["Authentication"],
        )
    """
    router = APIRouter(
        prefix=prefix,
        tags=list(tags),
        include_in_schema=include_in_schema,
        route_class=EnvelopeRoute,
    )

    logger.debug("Created API router", prefix=prefix, tags=list(tags))

    return router
