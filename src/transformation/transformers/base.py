"""
Base transformer class and common utilities.

Provides the abstract base class for all value transformers and the shared
metrics for tracking transformation operations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from prometheus_client import Counter, Histogram

from sanitization.tokenizer import NULL_SENTINEL
from utils.metrics import get_or_create_metric

logger = logging.getLogger(__name__)


# Metrics
TRANSFORMATIONS_APPLIED = get_or_create_metric(
    lambda: Counter(
        "transformations_applied_total",
        "Total field values replaced",
        ["transformer_type"],
    ),
    "transformations_applied_total",
)

TRANSFORMATION_TIME = get_or_create_metric(
    lambda: Histogram(
        "transformation_seconds",
        "Time to transform one field value",
        ["transformer_type"],
        buckets=[0.00001, 0.00005, 0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05],
    ),
    "transformation_seconds",
)

TRANSFORMATION_ERRORS = get_or_create_metric(
    lambda: Counter(
        "transformation_errors_total",
        "Transformation errors",
        ["transformer_type", "error_type"],
    ),
    "transformation_errors_total",
)


class Transformer(ABC):
    """Base class for field value transformers."""

    @abstractmethod
    def transform(self, value: str, context: dict[str, Any]) -> str:
        """
        Transform a single raw field value.

        Args:
            value: Raw field text as it appears in the COPY data
            context: Transformation context (table_name, column_name)

        Returns:
            Replacement field text
        """
        pass

    def get_type(self) -> str:
        """Get transformer type for metrics."""
        return self.__class__.__name__

    @staticmethod
    def is_null(value: str) -> bool:
        return value == NULL_SENTINEL

    def record_applied(self) -> None:
        TRANSFORMATIONS_APPLIED.labels(transformer_type=self.get_type()).inc()

    def record_error(self, error: Exception) -> None:
        # Field values and column names stay out of logs
        TRANSFORMATION_ERRORS.labels(
            transformer_type=self.get_type(),
            error_type=type(error).__name__,
        ).inc()
        logger.error(f"{self.get_type()} failed: {type(error).__name__}")


class NullTransformer(Transformer):
    """Replace every value with the null sentinel (``set_null`` columns)."""

    def transform(self, value: str, context: dict[str, Any]) -> str:
        if not self.is_null(value):
            self.record_applied()
        return NULL_SENTINEL
