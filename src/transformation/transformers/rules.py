"""
Transformer factories for column policies.

Maps a column policy to the transformer that implements it and a
generation strategy to its generator.
"""

import logging

from sanitization.policy import ColumnCategory, ColumnPolicy, GenerationStrategy
from transformation.memo import PersistenceMemo

from .base import NullTransformer, Transformer
from .generators import KeyedHashGenerator, RandomStringGenerator, ReplacementGenerator
from .scalar import EmailTransformer, TextTransformer
from .structured import ArrayTransformer, JSONTransformer

logger = logging.getLogger(__name__)


def create_generator(
    strategy: GenerationStrategy = GenerationStrategy.RANDOM,
    pepper: bytes | None = None,
) -> ReplacementGenerator:
    """
    Create the replacement generator for a deployment.

    Args:
        strategy: RANDOM or HASH
        pepper: Secret for the HASH strategy. If None, a random pepper is
            drawn (mapping is stable only within this process).

    Returns:
        Configured ReplacementGenerator
    """
    if strategy is GenerationStrategy.HASH:
        generator = KeyedHashGenerator(pepper=pepper)
    else:
        if pepper is not None:
            logger.warning("Pepper is ignored by the random generation strategy")
        generator = RandomStringGenerator()

    logger.info(f"Using {generator.get_type()} for replacement values")
    return generator


def create_transformer(
    policy: ColumnPolicy,
    generator: ReplacementGenerator,
    memo: PersistenceMemo,
) -> Transformer:
    """
    Create the transformer implementing one column policy.

    ``set_null`` overrides the category. Text, email and array transformers
    share the given memo when the policy persists values.
    """
    if policy.set_null:
        return NullTransformer()

    if policy.category is ColumnCategory.JSON:
        return JSONTransformer(generator, keys=policy.keys)

    scalar_options = dict(
        generator=generator,
        memo=memo,
        persist=policy.persist,
        suffixes=policy.suffixes,
        max_length=policy.max_length,
    )

    if policy.category is ColumnCategory.EMAIL:
        return EmailTransformer(**scalar_options)
    if policy.category is ColumnCategory.ARRAY:
        return ArrayTransformer(TextTransformer(**scalar_options))
    return TextTransformer(**scalar_options)
