from __future__ import annotations

import asyncio
import sys
import threading
from dataclasses import asdict
from types import TracebackType
from typing import Any, Callable

from app.observability.context import ErrorDescriptor
from app.observability.logging import LogService


def _log_fatal(log_service: LogService, source: str, exc: BaseException | None, message: str | None = None) -> None:
    fields: dict[str, Any] = {"source": source}
    if exc is not None:
        fields["error"] = asdict(ErrorDescriptor.from_exception(exc))
    if message:
        fields["detail"] = message
    log_service.error("fatal_error", **fields)


def install_fatal_error_handlers(
    log_service: LogService,
    loop: asyncio.AbstractEventLoop | None = None,
) -> Callable[[], None]:
    """Route errors that escape every request scope to the logging service.

    Covers uncaught exceptions on the main thread and worker threads, and
    failures the event loop reports with no one awaiting them (e.g. a task
    exception that was never retrieved). Each handler passes the error on to
    the hook it replaced, so integrations installed earlier (Sentry) keep
    receiving it. The process is never terminated.
    Which request (if any) triggered the error is not captured.

    Returns a callable that restores the previous hooks.
    """

    previous_excepthook = sys.excepthook
    previous_threading_hook = threading.excepthook
    previous_loop_handler = loop.get_exception_handler() if loop is not None else None

    def handle_uncaught(
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            if exc.__traceback__ is None and tb is not None:
                exc = exc.with_traceback(tb)
            _log_fatal(log_service, "uncaught_exception", exc)
        # Hooks installed before us (e.g. Sentry's) still see the error.
        previous_excepthook(exc_type, exc, tb)

    def handle_thread(args: threading.ExceptHookArgs) -> None:
        if args.exc_value is not None and args.exc_type is not SystemExit:
            _log_fatal(log_service, "thread_exception", args.exc_value)
        previous_threading_hook(args)

    def handle_loop(event_loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        _log_fatal(log_service, "unhandled_async_error", context.get("exception"), context.get("message"))
        # No fallback to the default handler: it would log the same error again.
        if previous_loop_handler is not None:
            previous_loop_handler(event_loop, context)

    sys.excepthook = handle_uncaught
    threading.excepthook = handle_thread
    if loop is not None:
        loop.set_exception_handler(handle_loop)

    def restore() -> None:
        sys.excepthook = previous_excepthook
        threading.excepthook = previous_threading_hook
        if loop is not None and not loop.is_closed():
            loop.set_exception_handler(previous_loop_handler)

    return restore
