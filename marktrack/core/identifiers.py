"""
Random identifier and demo-data generation.
"""

import random
import string
from typing import Iterable, Optional, Set

from .exceptions import IdentifierExhaustedError, InvalidInputError


ALPHABET = string.ascii_letters + string.digits

DEFAULT_ID_LENGTH = 4
DEFAULT_NAME_LENGTH = 6


def resolve_rng(rng: Optional[random.Random]):
    """Return the given generator, or the module-level one when it is None."""
    return rng if rng is not None else random


def generate_code(length: int, rng: Optional[random.Random] = None) -> str:
    """Return ``length`` characters drawn uniformly from the 62 alphanumerics."""
    if length < 0:
        raise InvalidInputError(f"Code length must be non-negative, got {length}")
    source = resolve_rng(rng)
    return "".join(source.choice(ALPHABET) for _ in range(length))


def generate_course_code(rng: Optional[random.Random] = None) -> str:
    """Return a course code such as ``"AB 123"``."""
    source = resolve_rng(rng)
    first = source.choice(string.ascii_uppercase)
    second = source.choice(string.ascii_uppercase)
    number = source.randint(100, 999)
    return f"{first}{second} {number}"


class UniqueCodeGenerator:
    """Issues random codes that never repeat within this generator.

    Every code handed out, or registered through ``reserve``, is remembered.
    A freshly drawn code that collides is redrawn, up to ``max_attempts``
    times.
    """

    def __init__(self, length: int = DEFAULT_ID_LENGTH, max_attempts: int = 100,
                 rng: Optional[random.Random] = None):
        if length < 1:
            raise InvalidInputError(f"Identifier length must be positive, got {length}")
        if max_attempts < 1:
            raise InvalidInputError(f"max_attempts must be positive, got {max_attempts}")
        self._length = length
        self._max_attempts = max_attempts
        self._rng = rng
        self._issued: Set[str] = set()

    @property
    def length(self) -> int:
        return self._length

    @property
    def issued_count(self) -> int:
        return len(self._issued)

    def next_code(self) -> str:
        """Return a code this generator has not issued or reserved before."""
        for _ in range(self._max_attempts):
            code = generate_code(self._length, self._rng)
            if code not in self._issued:
                self._issued.add(code)
                return code
        raise IdentifierExhaustedError(
            f"No unused identifier of length {self._length} after {self._max_attempts} attempts",
            details={"length": self._length, "issued": len(self._issued)}
        )

    def reserve(self, codes: Iterable[str]) -> None:
        """Mark externally assigned codes as taken."""
        self._issued.update(codes)

    def is_issued(self, code: str) -> bool:
        return code in self._issued
