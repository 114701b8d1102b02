from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api import ROUTERS
from app.api.errors import register_error_handlers
from app.config import Settings, get_settings
from app.observability.fatal import install_fatal_error_handlers
from app.observability.logging import LogService, configure_logging
from app.observability.middleware import RequestLifecycleMiddleware
from app.observability.sentry import init_error_reporting


STATIC_DIR = Path(__file__).parent / "static"


def create_app(settings: Settings | None = None, log_service: LogService | None = None) -> FastAPI:
    settings = settings or get_settings()
    log_service = log_service or LogService()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        restore_hooks = install_fatal_error_handlers(log_service, loop=asyncio.get_running_loop())
        log_service.info("server_started", host=settings.host, port=settings.port)
        try:
            yield
        finally:
            log_service.info("server_stopped")
            restore_hooks()

    init_error_reporting(settings, log_service)

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.enable_docs else None,
        lifespan=lifespan,
    )
    app.state.log_service = log_service

    register_error_handlers(app)
    app.mount("/public", StaticFiles(directory=str(STATIC_DIR)), name="public")
    for router in ROUTERS:
        app.include_router(router)

    app.add_middleware(RequestLifecycleMiddleware, log_service=log_service.named("access"))
    return app


app = create_app()
