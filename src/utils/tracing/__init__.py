"""
Tracing using OpenTelemetry.

Instruments:
- Whole sanitization runs
- COPY block boundaries (span events)
- Policy loading

Tracing stays a no-op until initialize_tracing() installs an exporter.
"""

from .context import add_span_attributes, add_span_event, trace_function, trace_operation
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "trace_function",
    "add_span_attributes",
    "add_span_event",
]
