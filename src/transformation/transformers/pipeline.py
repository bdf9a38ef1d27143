"""
Row-level sanitization pipeline.

Applies one table's column policies to the tab-separated data rows of a
COPY block.
"""

import logging
from enum import Enum
from typing import NamedTuple

from sanitization.policy import TablePolicy
from sanitization.tokenizer import join_row, split_row
from transformation.memo import PersistenceMemo

from .base import Transformer
from .generators import ReplacementGenerator
from .rules import create_transformer

logger = logging.getLogger(__name__)


class RowOutcome(Enum):
    SANITIZED = "sanitized"
    BYPASSED = "bypassed"

    def __str__(self) -> str:
        return self.value


class RowResult(NamedTuple):
    line: str
    outcome: RowOutcome


class RowSanitizer:
    """
    Sanitize data rows of one COPY block.

    Transformers are resolved once per column position, so repeated or
    unconfigured column names cost nothing per row.
    """

    def __init__(
        self,
        table_policy: TablePolicy,
        column_names: tuple[str, ...],
        generator: ReplacementGenerator,
        memo: PersistenceMemo,
    ):
        """
        Initialize row sanitizer.

        Args:
            table_policy: Column policies of the block's table
            column_names: Column order captured from the COPY header
            generator: Strategy producing replacement strings
            memo: Run-wide persistence memo
        """
        self.table_policy = table_policy
        self.column_names = column_names

        transformers: dict[str, Transformer] = {}
        for name in set(column_names):
            policy = table_policy.get(name)
            if policy is not None:
                transformers[name] = create_transformer(policy, generator, memo)

        self.transformers: list[Transformer | None] = [
            transformers.get(name) for name in column_names
        ]

        logger.debug(
            f"Resolved {len(transformers)} transformer(s) for "
            f"{table_policy.table_name}"
        )

    def transform_fields(self, fields: list[str]) -> list[str]:
        """Transform a tokenized row, position by position."""
        transformed = []
        for column_name, transformer, value in zip(
            self.column_names, self.transformers, fields
        ):
            if transformer is not None:
                value = transformer.transform(
                    value,
                    {
                        "table_name": self.table_policy.table_name,
                        "column_name": column_name,
                    },
                )
            transformed.append(value)
        return transformed

    def sanitize_line(self, line: str) -> RowResult:
        """
        Tokenize, transform and rejoin one data row.

        Rows protected by an ignore rule are returned byte-identical.

        Raises:
            RowShapeError: If the row does not match the header's column count
        """
        fields = split_row(line, len(self.column_names))

        if self.table_policy.should_ignore(fields, self.column_names):
            return RowResult(line, RowOutcome.BYPASSED)

        return RowResult(join_row(self.transform_fields(fields)), RowOutcome.SANITIZED)
