"""
Persistence memo for repeated values.

Keeps one raw value mapped to exactly one replacement for the duration of a
run, across every column and table that enables ``persist``. The memo only
recognizes identical raw text; it knows nothing about foreign keys.
"""


class PersistenceMemo:
    """
    Run-scoped raw value -> replacement store.

    Grows monotonically and is never evicted. Once a raw value has an entry,
    every later lookup returns that same entry.
    """

    def __init__(self):
        self._values: dict[str, str] = {}

    def get(self, raw: str) -> tuple[str | None, bool]:
        """
        Look up the replacement for a raw value.

        Returns:
            Tuple of (replacement, found)
        """
        replacement = self._values.get(raw)
        return replacement, replacement is not None

    def put(self, raw: str, replacement: str) -> None:
        # First write wins so earlier output stays consistent with later rows
        self._values.setdefault(raw, replacement)

    def __contains__(self, raw: str) -> bool:
        return raw in self._values

    def __len__(self) -> int:
        return len(self._values)
