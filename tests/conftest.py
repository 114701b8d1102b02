from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import pytest
import structlog
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient

from app.config import get_settings
from app.main import create_app
from app.observability.logging import LogService


class RecordingLog(LogService):
    """LogService that keeps records in memory, with the bound contextvars."""

    def __init__(self) -> None:
        super().__init__(name="test")
        self.records: list[dict[str, Any]] = []

    def _record(self, level: str, event: str, fields: dict[str, Any]) -> None:
        self.records.append(
            {
                "level": level,
                "event": event,
                "fields": fields,
                "context": dict(structlog.contextvars.get_contextvars()),
            }
        )

    def info(self, event: str, **fields: Any) -> None:
        self._record("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._record("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._record("error", event, fields)

    def named(self, name: str) -> RecordingLog:
        return self

    def events(self, name: str) -> list[dict[str, Any]]:
        return [r for r in self.records if r["event"] == name]


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASIC_AUTH_USERNAME", "admin")
    monkeypatch.setenv("BASIC_AUTH_PASSWORD", "s3cret-pass")
    monkeypatch.setenv("APP_TITLE", "Test API")
    for name in ("SENTRY_DSN", "ENABLE_DOCS", "ENVIRONMENT", "APP_VERSION"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def recording_log() -> RecordingLog:
    return RecordingLog()


@pytest.fixture
def test_app(recording_log: RecordingLog) -> FastAPI:
    app = create_app(log_service=recording_log)

    @app.get("/boom")
    async def boom() -> dict[str, str]:
        raise RuntimeError("handler exploded")

    @app.get("/teapot")
    async def teapot() -> dict[str, str]:
        raise HTTPException(status_code=418, detail="short and stout")

    @app.get("/handled-500")
    async def handled_500() -> dict[str, str]:
        raise HTTPException(status_code=503, detail="maintenance")

    @app.get("/slow")
    async def slow(delay: float = 0.05) -> dict[str, float]:
        await asyncio.sleep(delay)
        return {"delay": delay}

    return app


@pytest.fixture
async def api_client(test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    # Starlette re-raises unhandled errors after sending the 500; keep the response instead.
    transport = ASGITransport(app=test_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
