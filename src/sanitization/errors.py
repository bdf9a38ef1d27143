"""
Error taxonomy for dump sanitization.

Every error defined here is fatal for the run. The engine never catches one
to skip a row or field.
"""


class SanitizationError(Exception):
    """Base exception for all sanitization failures."""


class MalformedHeaderError(SanitizationError):
    """COPY header missing its column list or yielding zero columns."""


class RowShapeError(SanitizationError):
    """Data row field count does not match the captured column count."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Row has {actual} field(s), expected {expected} from COPY header"
        )


class MalformedJSONError(SanitizationError):
    """A json-category field could not be parsed as a JSON object."""


class GenerationError(SanitizationError):
    """Replacement generation failed (entropy source or hashing)."""


class ConfigurationError(SanitizationError):
    """Policy configuration missing, unparseable or invalid."""
