"""
Field value transformers for dump sanitization.

Supports:
- Plain text and email replacement with optional persistence
- Suffix preservation and length caps
- JSON object key whitelists
- PostgreSQL array values
- Random and keyed-hash generation strategies
"""

from .base import NullTransformer, Transformer
from .generators import (
    ALPHABET,
    KeyedHashGenerator,
    RandomStringGenerator,
    ReplacementGenerator,
)
from .pipeline import RowOutcome, RowResult, RowSanitizer
from .rules import create_generator, create_transformer
from .scalar import EmailTransformer, TextTransformer, apply_suffix
from .structured import ArrayTransformer, JSONTransformer

__all__ = [
    "Transformer",
    "NullTransformer",
    "TextTransformer",
    "EmailTransformer",
    "JSONTransformer",
    "ArrayTransformer",
    "apply_suffix",
    "ReplacementGenerator",
    "RandomStringGenerator",
    "KeyedHashGenerator",
    "ALPHABET",
    "RowSanitizer",
    "RowResult",
    "RowOutcome",
    "create_generator",
    "create_transformer",
]
