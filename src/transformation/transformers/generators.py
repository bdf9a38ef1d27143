"""
Replacement generation strategies.

Every strategy implements ``generate(raw, length)`` and guarantees an output
of exactly ``length`` characters that differs from ``raw`` whenever
``length`` is positive. Two strategies are provided:

- RandomStringGenerator: draws characters from a cryptographically strong
  source; repeated calls for the same raw value give different results.
- KeyedHashGenerator: derives characters from SHAKE-256 over the raw value
  keyed with a secret pepper; the same raw value and length always give the
  same result for the lifetime of the generator.
"""

import hashlib
import logging
import secrets
from abc import ABC, abstractmethod

from sanitization.errors import GenerationError

logger = logging.getLogger(__name__)

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-"


class ReplacementGenerator(ABC):
    """Strategy interface for producing replacement strings."""

    def __init__(self, alphabet: str = ALPHABET):
        if len(set(alphabet)) < 2:
            raise ValueError("Alphabet must contain at least two distinct characters")
        self.alphabet = alphabet

    @abstractmethod
    def generate(self, raw: str, length: int) -> str:
        """
        Produce a replacement for raw of exactly length characters.

        Raises:
            GenerationError: If the entropy or hashing source fails
        """
        pass

    def get_type(self) -> str:
        return self.__class__.__name__


class RandomStringGenerator(ReplacementGenerator):
    """Random replacement strings from the `secrets` module."""

    def generate(self, raw: str, length: int) -> str:
        if length <= 0:
            return ""

        try:
            while True:
                candidate = "".join(
                    secrets.choice(self.alphabet) for _ in range(length)
                )
                if candidate != raw:
                    return candidate
        except (OSError, NotImplementedError) as e:
            raise GenerationError(f"Random source failed: {e}") from e


class KeyedHashGenerator(ReplacementGenerator):
    """
    Deterministic replacement strings from a keyed extendable-output hash.

    The pepper is mixed into every digest so replacements cannot be
    precomputed from a list of likely raw values. When no pepper is given a
    random one is drawn, which makes the mapping stable within the process
    but different across runs.
    """

    MIN_PEPPER_LENGTH = 16

    def __init__(self, pepper: bytes | None = None, alphabet: str = ALPHABET):
        """
        Initialize keyed hash generator.

        Args:
            pepper: Secret key material. If None, 32 random bytes are drawn.
            alphabet: Characters replacements are drawn from

        Raises:
            ValueError: If the pepper is shorter than MIN_PEPPER_LENGTH bytes
        """
        super().__init__(alphabet)

        if pepper is None:
            try:
                pepper = secrets.token_bytes(32)
            except (OSError, NotImplementedError) as e:
                raise GenerationError(f"Could not draw pepper: {e}") from e
            logger.debug("Generated random pepper for keyed hash generation")
        elif len(pepper) < self.MIN_PEPPER_LENGTH:
            raise ValueError(
                f"Pepper must be at least {self.MIN_PEPPER_LENGTH} bytes long"
            )

        self._pepper = pepper

    def _digest(self, raw: str, length: int, attempt: int) -> bytes:
        hasher = hashlib.shake_256()
        hasher.update(self._pepper)
        hasher.update(attempt.to_bytes(4, "big"))
        hasher.update(raw.encode("utf-8", "surrogateescape"))
        return hasher.digest(length)

    def generate(self, raw: str, length: int) -> str:
        if length <= 0:
            return ""

        size = len(self.alphabet)
        attempt = 0
        try:
            while True:
                digest = self._digest(raw, length, attempt)
                candidate = "".join(self.alphabet[byte % size] for byte in digest)
                if candidate != raw:
                    return candidate
                attempt += 1
        except (ValueError, OverflowError) as e:
            raise GenerationError(f"Hashing failed: {e}") from e
