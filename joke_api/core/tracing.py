"""
Span scoping for traced operations.

``span_scope`` opens one span around a unit of work, closes it exactly once on
every exit path, and maps a raised exception onto the span status before
re-raising it. ``with_span`` applies the same scope to an async operation and
hands it the span through a keyword-only ``span`` argument.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator, Optional, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

from joke_api.core.logging_config import get_logger
from joke_api.core.monitoring import get_tracer

logger = get_logger(__name__)

T = TypeVar("T")


@contextmanager
def span_scope(name: str, kind: SpanKind = SpanKind.SERVER, tracer: Optional[Tracer] = None) -> Iterator[Span]:
    """
    Open a span for the enclosed block.

    The span becomes the current span so instrumented outbound calls nest under
    it. On normal exit the status is OK; on an exception the message and the
    exception are recorded, the status is ERROR and the exception is re-raised.

    Args:
        name: Span name.
        kind: Span kind, SERVER for inbound request handling.
        tracer: Tracer to use; defaults to the service tracer.

    Yields:
        The open span.
    """
    span = (tracer or get_tracer()).start_span(name, kind=kind)
    try:
        with trace.use_span(span, end_on_exit=False, record_exception=False, set_status_on_exception=False):
            yield span
    except Exception as exc:
        span.set_status(Status(StatusCode.ERROR, str(exc) or type(exc).__name__))
        span.record_exception(exc)
        logger.debug(f"Span {name} closed with error: {exc!r}")
        raise
    else:
        span.set_status(Status(StatusCode.OK))
    finally:
        span.end()


def with_span(
    name: str, kind: SpanKind = SpanKind.SERVER
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorate an async operation so each call runs inside ``span_scope``.

    The decorated callable must accept a keyword-only ``span`` argument. When it
    is a method of an object exposing a ``tracer`` attribute, that tracer is used.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            tracer = getattr(args[0], "tracer", None) if args else None
            with span_scope(name, kind=kind, tracer=tracer) as span:
                return await func(*args, span=span, **kwargs)

        return wrapper

    return decorator
