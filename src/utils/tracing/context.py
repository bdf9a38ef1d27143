"""
Span helpers for sanitization runs.

Wraps the OpenTelemetry API so callers can open spans, tag the active span
and decorate functions without holding span references. Error details are
limited to the exception type: messages may quote dump content.
"""

import functools
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .tracer import get_tracer


def _stringify(attributes: dict) -> dict[str, str]:
    return {key: str(value) for key, value in attributes.items()}


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes
):
    """
    Open a span around a block of work.

    Args:
        operation_name: Span name
        kind: Span kind (INTERNAL for everything the sanitizer does)
        **attributes: Attributes set on the span, stringified

    Yields:
        The active span

    Example:
        >>> with trace_operation("sanitize_dump", source="dump.sql") as span:
        ...     stats = scanner.run(lines)
        ...     span.set_attribute("rows_sanitized", stats.rows_sanitized)
    """
    tracer = get_tracer()

    with tracer.start_as_current_span(
        operation_name,
        kind=kind,
        attributes=_stringify(attributes),
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            span.set_attribute("error.type", type(e).__name__)
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            raise


def trace_function(operation_name: str | None = None, **default_attributes):
    """
    Decorator running each call of the wrapped function in its own span.

    The span name defaults to ``<module>.<function>``.
    """
    def decorator(func):
        name = operation_name or f"{func.__module__}.{func.__name__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with trace_operation(name, function=func.__name__, **default_attributes):
                return func(*args, **kwargs)

        return wrapper
    return decorator


def add_span_attributes(**attributes) -> None:
    """Set attributes on the active span, if it is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(_stringify(attributes))


def add_span_event(name: str, **attributes) -> None:
    """Record a point-in-time event on the active span, if it is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=_stringify(attributes))
