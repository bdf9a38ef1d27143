"""
Value transformation engine for dump sanitization.

Provides the per-column transformers, replacement generators and the
run-scoped persistence memo.
"""

from transformation.memo import PersistenceMemo
from transformation.transformers import (
    ArrayTransformer,
    EmailTransformer,
    JSONTransformer,
    KeyedHashGenerator,
    NullTransformer,
    RandomStringGenerator,
    RowSanitizer,
    TextTransformer,
    Transformer,
    create_generator,
    create_transformer,
)

__all__ = [
    "PersistenceMemo",
    "Transformer",
    "NullTransformer",
    "TextTransformer",
    "EmailTransformer",
    "JSONTransformer",
    "ArrayTransformer",
    "RandomStringGenerator",
    "KeyedHashGenerator",
    "RowSanitizer",
    "create_generator",
    "create_transformer",
]
