from __future__ import annotations

import traceback
from dataclasses import asdict, dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class RequestContext:
    """Per-request timing state, created when the request is received."""

    request_id: str
    bench: float | None = None

    def mark_received(self) -> bool:
        """Attach the start marker. Returns False if one was already attached."""

        if self.bench is not None:
            return False
        self.bench = perf_counter()
        return True

    @property
    def has_timer(self) -> bool:
        return self.bench is not None

    def elapsed_ms(self) -> float:
        if self.bench is None:
            return 0.0
        return max(0.0, (perf_counter() - self.bench) * 1000.0)


@dataclass(frozen=True)
class ErrorDescriptor:
    name: str
    message: str
    stack: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorDescriptor:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(name=type(exc).__name__, message=str(exc), stack=stack)


@dataclass(frozen=True)
class CompletionRecord:
    http_status: int
    request_time_ms: float
    error: ErrorDescriptor | None = field(default=None)

    def as_log_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "http_status": self.http_status,
            "request_time_ms": round(self.request_time_ms, 2),
        }
        if self.error is not None:
            fields["error"] = asdict(self.error)
        return fields
