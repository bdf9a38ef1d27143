"""
COPY header parsing.

Extracts the fully-qualified table name and the ordered column names from a
``COPY <table> (<col1>, <col2>, ...) FROM stdin;`` statement.
"""

import logging
from dataclasses import dataclass

from .errors import MalformedHeaderError

logger = logging.getLogger(__name__)

COPY_KEYWORD = "COPY "


@dataclass(frozen=True)
class CopyBlock:
    """Table name and column order captured from a COPY header."""

    table_name: str
    column_names: tuple[str, ...]

    @property
    def column_count(self) -> int:
        return len(self.column_names)


def is_copy_statement(statement: str) -> bool:
    return statement.startswith(COPY_KEYWORD)


def get_table_name(statement: str) -> str:
    """
    Get the table name from a COPY statement.

    The table name is the second space-delimited token, returned verbatim
    so quoting such as ``public."Users"`` is preserved.

    Raises:
        MalformedHeaderError: If the statement is not a COPY statement
    """
    if not is_copy_statement(statement):
        raise MalformedHeaderError("Statement is not a COPY statement")

    parts = statement.split(" ")
    if len(parts) < 2 or not parts[1]:
        raise MalformedHeaderError("COPY statement has no table name")

    return parts[1]


def get_column_names(statement: str) -> tuple[str, ...]:
    """
    Get the ordered column names from a COPY statement.

    Raises:
        MalformedHeaderError: If the column list delimiters are missing or
            the list is empty
    """
    start = statement.find("(")
    end = statement.find(")")

    if start == -1 or end == -1 or end < start:
        raise MalformedHeaderError(f"Unexpected COPY statement: {statement}")

    columns = statement[start + 1 : end]
    names = tuple(name.strip('"') for name in columns.split(", "))

    if not columns or not any(names):
        raise MalformedHeaderError(
            f"Could not split COPY statement columns: {statement}"
        )

    return names


def parse_copy_header(statement: str) -> CopyBlock:
    """
    Parse a COPY header into a CopyBlock.

    Args:
        statement: Full COPY header line, e.g.
            ``COPY public."Users" ("Id", "Email") FROM stdin;``

    Returns:
        CopyBlock with table name and column names

    Raises:
        MalformedHeaderError: If the header cannot be parsed
    """
    block = CopyBlock(
        table_name=get_table_name(statement),
        column_names=get_column_names(statement),
    )
    logger.debug(
        f"Captured COPY block for {block.table_name} "
        f"with {block.column_count} column(s)"
    )
    return block
