"""
Request Logging Helpers
Log enrichment shared by the success and error paths
"""
from __future__ import annotations

import json
import os
import platform
import socket
import sys
import time
from datetime import datetime, timezone
from typing import Any, Mapping

from starlette.requests import Request

from api_envelope.api.error_categories import LogLevel
from api_envelope.infrastructure.observability.logger import StructuredLogger

# Requests slower than this trigger a warning log
SLOW_REQUEST_THRESHOLD_MS = 3000

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH"})


def now_ms() -> float:
    """Wall-clock time in milliseconds."""
    return time.time() * 1000


def request_path(request: Request) -> str:
    """Path plus query string, as the client sent it."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def get_request_metadata(request: Request) -> dict[str, str]:
    headers = request.headers
    return {
        "user_agent": headers.get("user-agent") or "Unknown",
        "referer": headers.get("referer") or headers.get("referrer") or "Direct",
        "content_type": headers.get("content-type") or "None",
        "accept_language": headers.get("accept-language") or "Unknown",
        "origin": headers.get("origin") or "Unknown",
    }


def get_system_metadata() -> dict[str, Any]:
    meta: dict[str, Any] = {
        "hostname": socket.gethostname(),
        "platform": sys.platform,
        "python_version": platform.python_version(),
        "pid": os.getpid(),
    }
    if hasattr(os, "getloadavg"):
        try:
            meta["cpu_load"] = round(os.getloadavg()[0], 2)
        except OSError:
            pass
    return meta


async def read_json_body(request: Request) -> Any:
    """
    Parse a JSON request body once and keep it on request.state.

    request.state lives on the ASGI scope, so exception handlers that get a
    fresh Request object still see the captured body.
    """
    if hasattr(request.state, "json_body"):
        return request.state.json_body

    body: Any = None
    if "json" in request.headers.get("content-type", ""):
        raw = await request.body()
        if raw:
            try:
                body = json.loads(raw)
            except ValueError:
                body = None
    request.state.json_body = body
    return body


def captured_body(request: Request) -> Any:
    return getattr(request.state, "json_body", None)


def has_content(body: Any) -> bool:
    return isinstance(body, (Mapping, list)) and len(body) > 0


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def emit(logger: StructuredLogger, level: LogLevel, event: str, context: Mapping[str, Any]) -> None:
    methods = {"info": logger.info, "warning": logger.warning, "error": logger.error}
    methods[level](event, **context)


def log_slow_request(
    logger: StructuredLogger,
    method: str,
    path: str,
    duration_ms: int,
    context: Mapping[str, Any],
) -> bool:
    """Emit a slow-request alert if `duration_ms` exceeds the threshold."""
    if duration_ms <= SLOW_REQUEST_THRESHOLD_MS:
        return False
    logger.warning(
        f"⏰ SLOW REQUEST: {method} {path} took {duration_ms}ms "
        f"(threshold: {SLOW_REQUEST_THRESHOLD_MS}ms)",
        **{**context, "alert_type": "SLOW_REQUEST"},
    )
    return True
