from __future__ import annotations

from time import monotonic

from fastapi import APIRouter, Depends

from app.config import get_settings
from app.models.schemas import HealthResponse, StatusResponse
from app.services.auth_dependencies import require_basic_auth

router = APIRouter(tags=["health"])

_STARTED_AT = monotonic()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.get("/api/status", response_model=StatusResponse)
async def status(user: str = Depends(require_basic_auth)) -> StatusResponse:
    settings = get_settings()
    return StatusResponse(
        version=settings.app_version,
        environment=settings.environment,
        user=user,
        uptime_s=round(monotonic() - _STARTED_AT, 3),
    )
