"""
Transformers for structured field values.

Provides transformers for JSON object columns (per-key replacement driven
by a key whitelist) and PostgreSQL array columns (per-element replacement).
"""

import logging
from collections.abc import Sequence
from typing import Any

import simplejson

from sanitization.errors import MalformedJSONError, SanitizationError
from sanitization.tokenizer import NULL_SENTINEL, decode_copy_text, encode_copy_text

from .base import TRANSFORMATION_TIME, Transformer
from .generators import ReplacementGenerator
from .scalar import TextTransformer

logger = logging.getLogger(__name__)

JSON_VALUE_LENGTH = 10
ARRAY_NULL_ELEMENT = "NULL"


def _reject_constant(name: str):
    # NaN and Infinity are not JSON and PostgreSQL never writes them
    raise MalformedJSONError(f"Field contains non-JSON constant {name}")


class JSONTransformer(Transformer):
    """
    Replace whitelisted keys of a JSON object.

    Keys outside the whitelist are left untouched. Replaced values are always
    freshly generated strings and never enter the memo. With an empty
    whitelist the whole field becomes NULL.
    """

    def __init__(
        self,
        generator: ReplacementGenerator,
        keys: Sequence[str] = (),
        value_length: int = JSON_VALUE_LENGTH,
    ):
        self.generator = generator
        self.keys = tuple(keys)
        self.value_length = value_length

    def transform(self, value: str, context: dict[str, Any]) -> str:
        with TRANSFORMATION_TIME.labels(transformer_type=self.get_type()).time():
            if self.is_null(value):
                return value

            if not self.keys:
                self.record_applied()
                return NULL_SENTINEL

            try:
                document = self._parse(value)
                for key in self.keys:
                    if key in document:
                        document[key] = self.generator.generate(
                            self._seed(document[key]), self.value_length
                        )
            except SanitizationError as e:
                self.record_error(e)
                raise

            self.record_applied()
            # Keeps key order, number text and PostgreSQL's jsonb separators
            return encode_copy_text(
                simplejson.dumps(document, ensure_ascii=False, use_decimal=True)
            )

    @staticmethod
    def _parse(value: str) -> dict:
        try:
            document = simplejson.loads(
                decode_copy_text(value),
                use_decimal=True,
                parse_constant=_reject_constant,
            )
        except simplejson.JSONDecodeError as e:
            # e.msg only, the document itself may hold sensitive data
            raise MalformedJSONError(
                f"Field is not valid JSON: {e.msg} (position {e.pos})"
            ) from e

        if not isinstance(document, dict):
            raise MalformedJSONError(
                f"Field is JSON {type(document).__name__}, expected an object"
            )
        return document

    @staticmethod
    def _seed(original: Any) -> str:
        if isinstance(original, str):
            return original
        return simplejson.dumps(original, sort_keys=True, use_decimal=True)


class ArrayTransformer(Transformer):
    """
    Replace every element of a ``{e1,e2,...}`` array value.

    Each element goes through the wrapped text transformer, so persist,
    suffix and length rules apply per element and persisted elements share
    the run-wide memo with scalar columns.

    Examples:
        {abc123,untzxxx123} -> {Qe0x-B,H71kPzq0aT}
        {}                  -> {}
    """

    def __init__(self, element_transformer: TextTransformer):
        self.element_transformer = element_transformer

    def transform(self, value: str, context: dict[str, Any]) -> str:
        with TRANSFORMATION_TIME.labels(transformer_type=self.get_type()).time():
            if self.is_null(value):
                return value

            interior = value.strip("{").strip("}")
            elements = [
                element
                if element == ARRAY_NULL_ELEMENT
                else self.element_transformer.transform(element, context)
                for element in interior.split(",")
            ]

            self.record_applied()
            return "{" + ",".join(elements) + "}"
