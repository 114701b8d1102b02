from __future__ import annotations

import asyncio
import uuid
from typing import Any, Callable

import structlog

from app.observability.context import CompletionRecord, ErrorDescriptor, RequestContext
from app.observability.logging import LogService


REQUEST_CONTEXT_KEY = "request_context"


class RequestLifecycleMiddleware:
    """Times every HTTP request and emits exactly one completion record for it.

    Requests that finish normally are logged with their final status. Requests
    whose handler raised an exception nobody handled are logged with the error
    descriptor, then the exception is re-raised so Starlette's server error
    middleware can turn it into the 500 response.
    """

    def __init__(self, app: Callable[..., Any], log_service: LogService) -> None:
        self.app = app
        self.log = log_service

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        context = self._attach_context(scope)

        structlog.contextvars.bind_contextvars(
            request_id=context.request_id,
            path=scope.get("path"),
            method=scope.get("method"),
        )

        status_code: int | None = None

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except asyncio.CancelledError:
            # Client went away; nothing was finalized, so nothing is logged.
            raise
        except Exception as exc:
            record = CompletionRecord(
                http_status=status_code if status_code is not None else 500,
                request_time_ms=self._elapsed_ms(context),
                error=ErrorDescriptor.from_exception(exc),
            )
            self.log.info("http_request", **record.as_log_fields())
            raise
        else:
            if status_code is not None:
                record = CompletionRecord(
                    http_status=status_code,
                    request_time_ms=self._elapsed_ms(context),
                )
                self.log.info("http_request", **record.as_log_fields())
            else:
                self.log.warning("request_without_response", request_id=context.request_id)
        finally:
            structlog.contextvars.clear_contextvars()

    def _attach_context(self, scope: dict[str, Any]) -> RequestContext:
        state = scope.setdefault("state", {})
        context = state.get(REQUEST_CONTEXT_KEY)
        if not isinstance(context, RequestContext):
            context = RequestContext(request_id=str(uuid.uuid4()))
            state[REQUEST_CONTEXT_KEY] = context
        context.mark_received()
        return context

    def _elapsed_ms(self, context: RequestContext) -> float:
        if not context.has_timer:
            self.log.warning("request_timer_missing", request_id=context.request_id)
        return context.elapsed_ms()
