from __future__ import annotations

import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.services.auth_service import verify_credentials


basic_auth = HTTPBasic(auto_error=False)


def require_basic_auth(credentials: HTTPBasicCredentials | None = Depends(basic_auth)) -> str:
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Missing authentication",
            headers={"WWW-Authenticate": "Basic"},
        )

    if not verify_credentials(credentials.username, credentials.password):
        raise HTTPException(
            status_code=401,
            detail="Bad username or password",
            headers={"WWW-Authenticate": "Basic"},
        )

    structlog.contextvars.bind_contextvars(user=credentials.username)
    return credentials.username
