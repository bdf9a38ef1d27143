"""
Tracer setup for OpenTelemetry.

Until initialize_tracing() runs, the API's default no-op provider is in
place and spans cost nothing. Exporters are chosen by the CLI: OTLP over
gRPC and/or a console exporter writing to stderr.
"""

import logging
import sys

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "pgdump-sanitizer"

_provider: TracerProvider | None = None


def initialize_tracing(
    otlp_endpoint: str | None = None,
    console_export: bool = False,
    service_name: str = DEFAULT_SERVICE_NAME,
) -> trace.Tracer:
    """
    Install a tracer provider with the requested exporters.

    Args:
        otlp_endpoint: OTLP collector address, e.g. "localhost:4317"
        console_export: Print finished spans to stderr
        service_name: service.name resource attribute

    Returns:
        Tracer for the sanitizer
    """
    global _provider

    if _provider is not None:
        logger.warning("Tracing already initialized")
        return get_tracer()

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))

    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
        logger.info(f"Exporting spans to OTLP collector at {otlp_endpoint}")

    if console_export:
        provider.add_span_processor(
            BatchSpanProcessor(ConsoleSpanExporter(out=sys.stderr))
        )
        logger.info("Exporting spans to stderr")

    trace.set_tracer_provider(provider)
    _provider = provider
    return get_tracer()


def get_tracer() -> trace.Tracer:
    """Tracer from the current global provider (no-op when uninitialized)."""
    return trace.get_tracer(DEFAULT_SERVICE_NAME)


def shutdown_tracing() -> None:
    """Flush pending spans and release the provider."""
    global _provider

    if _provider is None:
        return

    try:
        _provider.shutdown()
        logger.info("Tracing shutdown complete")
    finally:
        _provider = None
