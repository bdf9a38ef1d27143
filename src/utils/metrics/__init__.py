"""
Custom metrics publishing to Prometheus

This module provides utilities for publishing sanitization metrics
to Prometheus for monitoring long-running dump jobs.

Usage:
    from utils.metrics import MetricsPublisher, SanitizationMetrics

    # Initialize publisher
    metrics = MetricsPublisher(port=9091)
    metrics.start()

    # Record sanitization metrics
    run_metrics = SanitizationMetrics()
    run_metrics.record_block(has_policy=True)
    run_metrics.record_row("sanitized")
"""

import logging
from typing import Any

from prometheus_client import CollectorRegistry

from sanitization import __version__

from .publisher import ApplicationInfo, MetricsPublisher
from .registry import get_or_create_metric
from .sanitization import SanitizationMetrics

logger = logging.getLogger(__name__)


def initialize_metrics(
    port: int = 9091,
    registry: CollectorRegistry | None = None,
) -> dict[str, Any]:
    """
    Initialize all metrics and start the metrics server

    Args:
        port: Port to expose metrics on (default: 9091)
        registry: Custom Prometheus registry (default: global REGISTRY)

    Returns:
        Dictionary containing all metrics objects:
        - publisher: MetricsPublisher
        - sanitization: SanitizationMetrics
        - app_info: ApplicationInfo
    """
    logger.info(f"Initializing metrics on port {port}")

    publisher = MetricsPublisher(port=port, registry=registry)
    publisher.start()

    return {
        "publisher": publisher,
        "sanitization": SanitizationMetrics(registry=registry),
        "app_info": ApplicationInfo(version=__version__, registry=registry),
    }


__all__ = [
    "MetricsPublisher",
    "SanitizationMetrics",
    "ApplicationInfo",
    "initialize_metrics",
    "get_or_create_metric",
]
