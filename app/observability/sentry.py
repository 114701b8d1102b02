from __future__ import annotations

import sentry_sdk

from app.config import Settings
from app.observability.logging import LogService


def init_error_reporting(settings: Settings, log_service: LogService) -> bool:
    """Enable Sentry when a DSN is configured.

    sentry_sdk picks up its FastAPI/Starlette integrations automatically, so
    every otherwise-unhandled error is forwarded once this returns True.
    """

    if not settings.sentry_dsn:
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=settings.app_version,
    )
    log_service.info("error_reporting_enabled", environment=settings.environment)
    return True
