"""
Metrics for dump sanitization runs.

Tracks COPY blocks, row outcomes and memo growth so long-running
sanitization jobs can be watched from Prometheus.
"""

import logging
from typing import Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CollectorRegistry,
    REGISTRY,
)

from .registry import get_or_create_metric

logger = logging.getLogger(__name__)


class SanitizationMetrics:
    """
    Metrics for a dump sanitization run

    Tracks runs, COPY blocks, rows and memoized replacements.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize sanitization metrics

        Args:
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.runs_total = get_or_create_metric(
            lambda: Counter(
                "sanitization_runs_total",
                "Total number of sanitization runs",
                ["status"],
                registry=self.registry,
            ),
            "sanitization_runs_total",
            self.registry,
        )

        self.copy_blocks_total = get_or_create_metric(
            lambda: Counter(
                "copy_blocks_total",
                "Total number of COPY blocks encountered",
                ["has_policy"],
                registry=self.registry,
            ),
            "copy_blocks_total",
            self.registry,
        )

        self.rows_processed_total = get_or_create_metric(
            lambda: Counter(
                "rows_processed_total",
                "Total number of COPY data rows processed",
                ["outcome"],
                registry=self.registry,
            ),
            "rows_processed_total",
            self.registry,
        )

        self.memo_entries = get_or_create_metric(
            lambda: Gauge(
                "memo_entries",
                "Number of persisted replacements held in memory",
                registry=self.registry,
            ),
            "memo_entries",
            self.registry,
        )

        self.block_sanitize_seconds = get_or_create_metric(
            lambda: Histogram(
                "block_sanitize_seconds",
                "Time spent sanitizing one COPY block",
                buckets=(0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30, 60, 300),
                registry=self.registry,
            ),
            "block_sanitize_seconds",
            self.registry,
        )

    def record_block(self, has_policy: bool) -> None:
        """Record a COPY block header"""
        self.copy_blocks_total.labels(
            has_policy="true" if has_policy else "false",
        ).inc()

    def record_row(self, outcome: str) -> None:
        """
        Record a processed data row

        Args:
            outcome: One of sanitized, bypassed, passthrough
        """
        self.rows_processed_total.labels(outcome=outcome).inc()

    def record_block_duration(self, duration: float) -> None:
        self.block_sanitize_seconds.observe(duration)

    def update_memo_size(self, size: int) -> None:
        self.memo_entries.set(size)

    def record_run(self, success: bool) -> None:
        status = "success" if success else "failed"
        self.runs_total.labels(status=status).inc()
        logger.debug(f"Recorded sanitization run: {status}")
