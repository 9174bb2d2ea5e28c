from typing import Any

import pytest
from fastapi import Body, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.testclient import TestClient
from pydantic import BaseModel

from api_envelope.api.base_router import create_api_router
from api_envelope.api.exceptions import (
    BusinessRuleViolationException,
    ConflictException,
    ForbiddenException,
    TooManyRequestsException,
    UnauthorizedException,
)
from api_envelope.app import create_app
from api_envelope.config import Settings


class RecordingLogger:
    """Test double for the structured logger."""

    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []

    def _record(self, level: str, event: str, context: dict[str, Any]) -> None:
        self.records.append({"level": level, "event": event, "context": context})

    def debug(self, event: str, **context: Any) -> None:
        self._record("debug", event, context)

    def info(self, event: str, **context: Any) -> None:
        self._record("info", event, context)

    def warning(self, event: str, **context: Any) -> None:
        self._record("warning", event, context)

    def error(self, event: str, **context: Any) -> None:
        self._record("error", event, context)

    def slow_alerts(self) -> list[dict[str, Any]]:
        return [r for r in self.records if r["context"].get("alert_type") == "SLOW_REQUEST"]

    def request_entries(self) -> list[dict[str, Any]]:
        return [r for r in self.records if r["context"].get("alert_type") != "SLOW_REQUEST"]


class FakeClock:
    def __init__(self, start: float = 1_700_000_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class SignupPayload(BaseModel):
    email: str
    age: int


def _build_test_router(clock: FakeClock):
    router = create_api_router(prefix="/test", tags=["test"])

    @router.get("/items/{item_id}")
    async def get_item(item_id: int):
        return {"message": "ok", "id": item_id}

    @router.get("/list")
    async def get_list():
        return [1, 2, 3]

    @router.get("/message-list")
    async def message_list():
        return {"message": ["first", "second"], "count": 2}

    @router.get("/no-message")
    async def no_message():
        return {"id": 1}

    @router.get("/plain")
    async def plain():
        return PlainTextResponse("pong")

    @router.post("/users", status_code=201)
    async def create_user(payload: dict = Body(...)):
        return {"message": "created", "name": payload.get("name")}

    @router.put("/users/1")
    async def replace_user(payload: dict = Body(...)):
        return {"name": payload.get("name")}

    @router.post("/signup")
    async def signup(payload: SignupPayload):
        return {"message": "welcome", "email": payload.email}

    @router.get("/slow")
    async def slow():
        clock.advance(3500)
        return {"message": "done"}

    @router.get("/exactly-threshold")
    async def exactly_threshold():
        clock.advance(3000)
        return {"message": "done"}

    @router.get("/slow-failure")
    async def slow_failure():
        clock.advance(4000)
        raise RuntimeError("boom")

    @router.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    @router.get("/silent")
    async def silent():
        raise RuntimeError()

    @router.get("/database")
    async def database():
        raise RuntimeError("database connection refused")

    @router.get("/upstream")
    async def upstream():
        raise HTTPException(status_code=502, detail="request timeout to upstream")

    @router.get("/validation")
    async def validation():
        raise HTTPException(
            status_code=400,
            detail={"message": ["email must be an email", "password too short"]},
        )

    @router.get("/error-only")
    async def error_only():
        raise HTTPException(status_code=400, detail={"error": "Bad Request"})

    @router.get("/empty-payload")
    async def empty_payload():
        raise HTTPException(status_code=400, detail={})

    @router.get("/unauthorized")
    async def unauthorized():
        raise UnauthorizedException()

    @router.get("/forbidden")
    async def forbidden():
        raise ForbiddenException()

    @router.get("/limited")
    async def limited():
        raise TooManyRequestsException()

    @router.get("/conflict")
    async def conflict():
        raise ConflictException("Email already registered")

    @router.get("/rule")
    async def rule():
        raise BusinessRuleViolationException("Insufficient balance")

    @router.get("/explicit-400")
    async def explicit_bad_request():
        return JSONResponse({"message": "bad input"}, status_code=400)

    @router.get("/explicit-403")
    async def explicit_forbidden():
        return JSONResponse({"error": "Forbidden"}, status_code=403, headers={"x-reason": "scope"})

    @router.get("/with-headers")
    async def with_headers():
        raise HTTPException(status_code=401, detail="Token expired", headers={"WWW-Authenticate": "Bearer"})

    return router


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", log_level="WARNING")


@pytest.fixture
def app(settings: Settings, recording_logger: RecordingLogger, clock: FakeClock):
    application = create_app(settings, logger=recording_logger, clock=clock)
    application.include_router(_build_test_router(clock))
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
