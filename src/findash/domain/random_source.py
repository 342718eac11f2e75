"""Seeded pseudo-random source used by the data generators."""

import math
from typing import Sequence, TypeVar

from findash.domain.errors import InvariantViolation

T = TypeVar("T")

MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280


class SeededRandom:
    """Linear congruential generator producing floats in [0, 1).

    The whole stream is a function of the seed; no system entropy is read.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._state = seed % MODULUS

    def next_float(self) -> float:
        """Advance the generator and return the next value in [0, 1)."""
        self._state = (self._state * MULTIPLIER + INCREMENT) % MODULUS
        return self._state / MODULUS

    def next_below(self, upper: int) -> int:
        """Return an integer in [0, upper)."""
        return math.floor(self.next_float() * upper)

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        if not items:
            raise InvariantViolation("Cannot choose from an empty sequence")
        return items[self.next_below(len(items))]

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.next_float() < probability
