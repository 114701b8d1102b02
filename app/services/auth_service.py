from __future__ import annotations

import secrets

from app.config import Settings, get_settings


def verify_credentials(username: str, password: str, settings: Settings | None = None) -> bool:
    settings = settings or get_settings()
    if not settings.basic_auth_configured:
        return False

    username_ok = secrets.compare_digest(username.encode("utf-8"), settings.basic_auth_username.encode("utf-8"))
    password_ok = secrets.compare_digest(password.encode("utf-8"), settings.basic_auth_password.encode("utf-8"))
    return username_ok and password_ok
