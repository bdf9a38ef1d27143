"""
Row tokenization for COPY text data.

Splits a data line into its tab-delimited fields and rejoins them, and
converts single fields between the COPY text escape encoding and plain
strings for values that need structural parsing (JSON).
"""

from .errors import RowShapeError

FIELD_DELIMITER = "\t"
NULL_SENTINEL = "\\N"
END_OF_DATA = "\\."

# COPY text format backslash escapes (see PostgreSQL COPY docs, "Text Format")
_DECODE_ESCAPES = {
    "\\": "\\",
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}
_ENCODE_ESCAPES = {raw: "\\" + code for code, raw in _DECODE_ESCAPES.items()}


def split_row(line: str, column_count: int) -> list[str]:
    """
    Split a data line into fields.

    Args:
        line: Data row without its line terminator
        column_count: Number of columns captured from the COPY header

    Returns:
        List of raw field strings

    Raises:
        RowShapeError: If the field count differs from column_count
    """
    fields = line.split(FIELD_DELIMITER)
    if len(fields) != column_count:
        raise RowShapeError(expected=column_count, actual=len(fields))
    return fields


def join_row(fields: list[str]) -> str:
    return FIELD_DELIMITER.join(fields)


def decode_copy_text(value: str) -> str:
    """
    Decode COPY text escapes into the plain value.

    Unknown escapes decode to the escaped character itself, matching the
    server's behavior for ``\\x`` where x is not a recognized code.
    """
    if "\\" not in value:
        return value

    chars = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\" and i + 1 < len(value):
            code = value[i + 1]
            chars.append(_DECODE_ESCAPES.get(code, code))
            i += 2
        else:
            chars.append(char)
            i += 1
    return "".join(chars)


def encode_copy_text(value: str) -> str:
    """Encode a plain value with COPY text escapes."""
    return "".join(_ENCODE_ESCAPES.get(char, char) for char in value)
