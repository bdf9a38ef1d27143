"""
Ambient utilities for the dump sanitizer

Provides:
- logging: Structured stderr/file logging
- metrics: Custom metrics publishing to Prometheus
- tracing: OpenTelemetry spans for runs and COPY blocks
"""

__version__ = "1.0.0"
__all__ = ["logging", "metrics", "tracing"]
