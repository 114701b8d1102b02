from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"


class StatusResponse(BaseModel):
    status: str = "ok"
    version: str
    environment: str
    user: str
    uptime_s: float = Field(ge=0)


class ErrorResponse(BaseModel):
    statusCode: int
    error: str
    message: str
