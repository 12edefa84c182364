"""Power-of-two predicate and the value types built on it."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np

from ..engine.errors import PowerSumError


def is_power_of_two(number: int) -> bool:
    """Return True for 1, 2, 4, 8, ...; False for zero, negatives and the rest."""
    return number > 0 and (number & (number - 1)) == 0


def is_power_of_two_array(values: np.ndarray) -> np.ndarray:
    """Vectorized :func:`is_power_of_two` over an integer array."""
    return (values > 0) & ((values & (values - 1)) == 0)


@dataclass(frozen=True)
class PowerTable:
    """
    Immutable ascending table of powers of two, 2^0 .. 2^(count-1).

    Built once at startup and handed to every component that enumerates
    candidate sums, so no module depends on import-time state.
    """

    values: Tuple[int, ...]

    @classmethod
    def of_count(cls, count: int) -> "PowerTable":
        """Create a table holding the first ``count`` powers of two."""
        return cls(tuple(1 << exponent for exponent in range(max(count, 0))))

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)


@dataclass(frozen=True, order=True)
class PowerPair:
    """Two distinct integers summing to a power of two, stored with a <= b."""

    a: int
    b: int

    def __post_init__(self):
        if self.a > self.b:
            low, high = self.b, self.a
            object.__setattr__(self, "a", low)
            object.__setattr__(self, "b", high)
        if self.a == self.b or not is_power_of_two(self.a + self.b):
            raise PowerSumError(
                f"{self.a}+{self.b} is not a sum of distinct numbers to a power of two",
                members=(self.a, self.b),
            )

    def sum(self) -> int:
        return self.a + self.b

    def __str__(self) -> str:
        return f"{self.a}+{self.b}={self.sum()}"


@dataclass(frozen=True, order=True)
class PowerTriplet:
    """
    Three integers whose pairwise sums are all powers of two.

    Members are stored sorted (a <= b <= c), so equal triplets compare and
    hash equal whatever order they were found in.
    """

    a: int
    b: int
    c: int

    def __post_init__(self):
        low, middle, high = sorted((self.a, self.b, self.c))
        object.__setattr__(self, "a", low)
        object.__setattr__(self, "b", middle)
        object.__setattr__(self, "c", high)
        if not (is_power_of_two(low + middle)
                and is_power_of_two(low + high)
                and is_power_of_two(middle + high)):
            raise PowerSumError(
                f"({low}, {middle}, {high}) does not pairwise sum to powers of two",
                members=(low, middle, high),
            )

    def __iter__(self) -> Iterator[int]:
        return iter((self.a, self.b, self.c))

    def overlaps(self, other: PowerTriplet) -> bool:
        """True when the triplets share a member without being identical."""
        if self == other:
            return False
        return any(mine == theirs for mine in self for theirs in other)

    def count_overlaps(self, other: PowerTriplet) -> int:
        """
        Count equal members between the two triplets.

        A full three-member match counts as zero: identical triplets do not
        overlap.
        """
        count = sum(1 for mine in self for theirs in other if mine == theirs)
        return 0 if count == 3 else count
