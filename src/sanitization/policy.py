"""
Column policy model.

Maps fully-qualified table names to per-column sanitization policies and
the ignore rules that protect known rows from mutation.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class ColumnCategory(Enum):
    """Data shape of a column, selecting which transformation applies."""

    TEXT = "text"
    EMAIL = "email"
    JSON = "json"
    ARRAY = "array"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "ColumnCategory":
        # "text_array" is the historical name of the array category
        if value == "text_array":
            return cls.ARRAY
        try:
            return cls(value)
        except ValueError as e:
            raise ConfigurationError(f"Unknown column type: {value}") from e


class GenerationStrategy(Enum):
    """How scalar replacements are produced."""

    RANDOM = "random"
    HASH = "hash"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ColumnPolicy:
    """Sanitization options for one column of one table."""

    name: str
    category: ColumnCategory = ColumnCategory.TEXT
    persist: bool = False
    set_null: bool = False
    suffixes: tuple[str, ...] = ()
    keys: tuple[str, ...] = ()
    max_length: int | None = None
    ignore: tuple[str, ...] = ()
    ignore_rows: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, options: Mapping[str, Any]) -> "ColumnPolicy":
        """Build a policy from a configuration mapping."""
        return cls(
            name=name,
            category=ColumnCategory.parse(options.get("type", "text")),
            persist=bool(options.get("persist", False)),
            set_null=bool(options.get("set_null", False)),
            suffixes=tuple(options.get("suffixes") or ()),
            keys=tuple(options.get("keys") or ()),
            max_length=options.get("max_length"),
            ignore=tuple(str(v) for v in options.get("ignore") or ()),
            ignore_rows={
                column: tuple(str(v) for v in values)
                for column, values in (options.get("ignore_rows") or {}).items()
            },
        )


@dataclass(frozen=True)
class IgnoreRule:
    """Bypass a whole row when `column` holds one of `values`."""

    column: str
    values: frozenset[str]


class TablePolicy:
    """Column policies and ignore rules for one table."""

    def __init__(self, table_name: str, columns: Iterable[ColumnPolicy]):
        self.table_name = table_name
        self.columns: dict[str, ColumnPolicy] = {}
        for policy in columns:
            self.columns[policy.name] = policy
        self.ignore_rules = self._collect_ignore_rules()

    def _collect_ignore_rules(self) -> list[IgnoreRule]:
        rules = []
        for policy in self.columns.values():
            if policy.ignore:
                rules.append(IgnoreRule(policy.name, frozenset(policy.ignore)))
            for column, values in policy.ignore_rows.items():
                rules.append(IgnoreRule(column, frozenset(values)))
        return rules

    def get(self, column_name: str) -> ColumnPolicy | None:
        return self.columns.get(column_name)

    def should_ignore(self, fields: list[str], column_names: Iterable[str]) -> bool:
        """
        Check whether a row is protected by an ignore rule.

        Args:
            fields: Raw field values of the row
            column_names: Column names in the same order as fields

        Returns:
            True if any designated column holds a configured ignore value
        """
        if not self.ignore_rules:
            return False

        for value, column_name in zip(fields, column_names):
            for rule in self.ignore_rules:
                if rule.column == column_name and value in rule.values:
                    return True
        return False

    def __len__(self) -> int:
        return len(self.columns)

    def __repr__(self) -> str:
        return f"TablePolicy({self.table_name!r}, columns={list(self.columns)})"


class PolicySet:
    """
    Per-table policy lookup for a sanitization run.

    Tables without an entry pass through unmodified.
    """

    def __init__(
        self,
        tables: Iterable[TablePolicy] = (),
        strategy: GenerationStrategy = GenerationStrategy.RANDOM,
    ):
        self.tables: dict[str, TablePolicy] = {t.table_name: t for t in tables}
        self.strategy = strategy

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> "PolicySet":
        """
        Build a PolicySet from a parsed configuration document.

        Args:
            document: Mapping with a ``tables`` section
                (table name -> column name -> options) and an optional
                ``strategy`` (``random`` or ``hash``)

        Raises:
            ConfigurationError: On unknown strategy or column type
        """
        try:
            strategy = GenerationStrategy(document.get("strategy", "random"))
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown generation strategy: {document.get('strategy')}"
            ) from e

        tables = []
        for table_name, columns in (document.get("tables") or {}).items():
            tables.append(
                TablePolicy(
                    table_name,
                    [
                        ColumnPolicy.from_dict(column_name, options or {})
                        for column_name, options in columns.items()
                    ],
                )
            )

        policy_set = cls(tables, strategy=strategy)
        logger.info(
            f"Loaded policies for {len(policy_set)} table(s) "
            f"(strategy: {strategy})"
        )
        return policy_set

    def get(self, table_name: str) -> TablePolicy | None:
        return self.tables.get(table_name)

    def __contains__(self, table_name: str) -> bool:
        return table_name in self.tables

    def __len__(self) -> int:
        return len(self.tables)
