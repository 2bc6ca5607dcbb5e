"""
Operation Tracing
Lightweight contextvars spans around generation, placement and repair.
"""

import contextvars
import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator

import structlog

logger = structlog.get_logger(__name__)

_trace_id: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="")
_span_id: contextvars.ContextVar[str] = contextvars.ContextVar("span_id", default="")


@dataclass
class Span:
    """Represents a single traced operation."""

    trace_id: str
    span_id: str
    parent_id: str
    name: str
    service: str
    start_time: float
    end_time: float = 0.0
    duration: float = 0.0
    tags: dict[str, str] = field(default_factory=dict)
    error: Exception | None = None

    def finish(self) -> None:
        """Mark span as complete."""
        self.end_time = time.time()
        self.duration = self.end_time - self.start_time

    def set_error(self, error: Exception) -> None:
        """Record an error in the span."""
        self.error = error


class Tracer:
    """Creates spans and reports them through structlog."""

    def __init__(self, service: str) -> None:
        self.service = service

    def start_span(self, name: str, **tags: str) -> tuple[Span, tuple[contextvars.Token, contextvars.Token]]:
        """Create a new span and make it current."""
        trace_id = _trace_id.get() or str(uuid.uuid4())
        span = Span(
            trace_id=trace_id,
            span_id=str(uuid.uuid4()),
            parent_id=_span_id.get(),
            name=name,
            service=self.service,
            start_time=time.time(),
            tags=tags,
        )
        tokens = (_trace_id.set(trace_id), _span_id.set(span.span_id))
        return span, tokens

    def submit(self, span: Span) -> None:
        """Report a completed span."""
        fields = {
            "trace_id": span.trace_id,
            "span_id": span.span_id,
            "operation": span.name,
            "duration_ms": span.duration * 1000,
            "service": span.service,
            **span.tags,
        }
        if span.parent_id:
            fields["parent_id"] = span.parent_id

        if span.error:
            logger.error("span_completed_with_error", error=str(span.error), **fields)
        elif span.duration > 5.0:
            logger.warning("span_completed_slow", **fields)
        else:
            logger.debug("span_completed", **fields)


_tracer: Tracer | None = None


def init_tracer(service: str = "selfgen") -> Tracer:
    """Initialize the process tracer."""
    global _tracer
    _tracer = Tracer(service)
    return _tracer


def get_tracer() -> Tracer | None:
    """Get the process tracer, if one was initialized."""
    return _tracer


@asynccontextmanager
async def trace_operation_async(operation: str, **kwargs: Any) -> AsyncGenerator[Span | None, None]:
    """Trace an async operation. A no-op until init_tracer() is called."""
    if _tracer is None:
        yield None
        return

    span, (trace_token, span_token) = _tracer.start_span(
        operation, **{k: str(v) for k, v in kwargs.items()}
    )
    try:
        yield span
    except Exception as e:
        span.set_error(e)
        raise
    finally:
        span.finish()
        _span_id.reset(span_token)
        _trace_id.reset(trace_token)
        _tracer.submit(span)


def get_trace_id() -> str:
    """Get current trace ID from context."""
    return _trace_id.get()
