"""
Scalar replacement transformers.

Provides transformers for plain text and email columns. Both honor the
persistence memo, suffix whitelist and maximum length options of a column
policy.
"""

import logging
from collections.abc import Sequence
from typing import Any

from sanitization.errors import SanitizationError
from transformation.memo import PersistenceMemo

from .base import TRANSFORMATION_TIME, Transformer
from .generators import ReplacementGenerator

logger = logging.getLogger(__name__)

MIN_EMAIL_LOCAL_LENGTH = 6
EMAIL_TLD = ".com"
# Characters dropped from the raw domain, sized for a short suffix like ".com"
EMAIL_DOMAIN_TRIM = 4
# "x@y.com": one character each side of "@" plus the TLD
MIN_EMAIL_LENGTH = 1 + 1 + 1 + len(EMAIL_TLD)


def apply_suffix(raw: str, candidate: str, suffixes: Sequence[str]) -> str:
    """
    Carry a whitelisted suffix of the raw value over to the replacement.

    The first suffix the raw value ends with overwrites the tail of the
    candidate.

    Examples:
        ABCDEF-TRIAL, candidate x8Kq0aZ7b1Lm, suffixes [-TRIAL] -> x8Kq0a-TRIAL
        ABCDEF-FULL,  candidate x8Kq0aZ7b1L,  suffixes [-TRIAL] -> x8Kq0aZ7b1L
    """
    for suffix in suffixes:
        if suffix and raw.endswith(suffix):
            keep = max(len(candidate) - len(suffix), 0)
            return candidate[:keep] + suffix
    return candidate


class TextTransformer(Transformer):
    """
    Replace plain text values with generated strings.

    With ``persist`` enabled the first replacement of a raw value is stored
    in the memo and reused for every later occurrence in the run.
    """

    def __init__(
        self,
        generator: ReplacementGenerator,
        memo: PersistenceMemo | None = None,
        persist: bool = False,
        suffixes: Sequence[str] = (),
        max_length: int | None = None,
    ):
        """
        Initialize text transformer.

        Args:
            generator: Strategy producing replacement strings
            memo: Run-wide memo, required when persist is True
            persist: Reuse one replacement per raw value for the whole run
            suffixes: Ordered suffix whitelist, first match wins
            max_length: Optional cap on generated length

        Raises:
            ValueError: If persist is requested without a memo
        """
        if persist and memo is None:
            raise ValueError("persist requires a PersistenceMemo")

        self.generator = generator
        self.memo = memo
        self.persist = persist
        self.suffixes = tuple(suffixes)
        self.max_length = max_length

    def target_length(self, length: int) -> int:
        if self.max_length is None:
            return length
        return min(length, self.max_length)

    def transform(self, value: str, context: dict[str, Any]) -> str:
        """Transform value, consulting the memo when persist is set."""
        with TRANSFORMATION_TIME.labels(transformer_type=self.get_type()).time():
            if self.is_null(value):
                return value

            try:
                if self.persist:
                    replacement, found = self.memo.get(value)
                    if not found:
                        replacement = self.replace(value)
                        self.memo.put(value, replacement)
                else:
                    replacement = self.replace(value)
            except SanitizationError as e:
                self.record_error(e)
                raise

            self.record_applied()
            return replacement

    def replace(self, value: str) -> str:
        """Generate a fresh, suffix-adjusted replacement."""
        candidate = self.generate(value)
        return apply_suffix(value, candidate, self.suffixes)

    def generate(self, value: str) -> str:
        return self.generator.generate(value, self.target_length(len(value)))


class EmailTransformer(TextTransformer):
    """
    Replace email addresses with generated addresses.

    The local part is regenerated with at least six characters, the domain
    loses its trailing four characters (a short TLD such as ".com") before
    being regenerated, and ".com" is appended.

    Examples:
        abc@d.com            -> Xk2p9Q@h.com
        john.doe@company.com -> Tq0-mZ8a@Jz2e.com

    With ``max_length`` the whole address fits the cap: the local part is
    shortened first, then the domain, down to one character each. A cap
    too small for any address falls back to plain text replacement.

    Values without an "@" are treated as plain text.
    """

    def generate(self, value: str) -> str:
        if "@" not in value:
            return super().generate(value)
        if self.max_length is not None and self.max_length < MIN_EMAIL_LENGTH:
            return super().generate(value)

        local, domain = value.split("@", 1)
        local_length, domain_length = self.address_lengths(len(local), len(domain))

        new_local = self.generator.generate(value, local_length)
        domain_seed = domain[:-EMAIL_DOMAIN_TRIM] or domain
        new_domain = self.generator.generate(domain_seed, domain_length)

        return f"{new_local}@{new_domain}{EMAIL_TLD}"

    def address_lengths(self, local: int, domain: int) -> tuple[int, int]:
        """Generated (local, domain stem) lengths for a raw address."""
        local_length = max(local, MIN_EMAIL_LOCAL_LENGTH)
        domain_length = max(domain - EMAIL_DOMAIN_TRIM, 1)

        if self.max_length is not None:
            overflow = local_length + 1 + domain_length + len(EMAIL_TLD) - self.max_length
            if overflow > 0:
                cut = min(overflow, local_length - 1)
                local_length -= cut
                domain_length -= min(overflow - cut, domain_length - 1)

        return local_length, domain_length
