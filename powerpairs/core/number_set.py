"""
Bounded set of integers with many pairwise sums equal to powers of two.

A NumberSet is progressively filled (usually one triplet at a time) until it
reaches its desired size; further insertions are ignored. Pair tests run on a
numpy sum matrix of the members.
"""

from typing import Dict, Iterable, Iterator, List, Tuple, Union

import numpy as np

from .powers import PowerPair, PowerTriplet, is_power_of_two_array


class NumberSet:
    """
    Set of at most ``desired_size`` distinct integers.

    Members keep insertion order so that every scan over them, and thus the
    whole search, is deterministic.
    """

    def __init__(self, desired_size: int, numbers: Iterable[int] = ()):
        self.desired_size = desired_size
        self.improvement_count = 0
        self._numbers: Dict[int, None] = {}
        for number in numbers:
            self.add(number)

    def __len__(self) -> int:
        return len(self._numbers)

    def __iter__(self) -> Iterator[int]:
        return iter(self._numbers)

    def __contains__(self, number: object) -> bool:
        return number in self._numbers

    def __repr__(self) -> str:
        return f"NumberSet({self.desired_size}, {self.sorted_numbers()})"

    @property
    def numbers(self) -> Tuple[int, ...]:
        return tuple(self._numbers)

    def sorted_numbers(self) -> List[int]:
        return sorted(self._numbers)

    def is_filled(self) -> bool:
        return len(self._numbers) >= self.desired_size

    def reset(self) -> None:
        """Clear members and the improvement counter for reuse."""
        self.improvement_count = 0
        self._numbers.clear()

    def add(self, item: Union[int, PowerTriplet]) -> None:
        """
        Insert a number, or the three members of a triplet in order.

        Each number is inserted only if it is new and the set is not filled
        yet, so adding past capacity is a no-op.
        """
        if isinstance(item, PowerTriplet):
            for number in item:
                self.add(number)
            return
        if not self.is_filled():
            self._numbers.setdefault(item, None)

    def copy(self) -> "NumberSet":
        duplicate = NumberSet(self.desired_size)
        duplicate._numbers = dict(self._numbers)
        duplicate.improvement_count = self.improvement_count
        return duplicate

    def replace(self, old: int, new: int) -> "NumberSet":
        """Return a copy with ``old`` swapped for ``new``."""
        replaced = self.copy()
        del replaced._numbers[old]
        replaced._numbers[new] = None
        return replaced

    def _values(self) -> np.ndarray:
        return np.fromiter(self._numbers, dtype=np.int64, count=len(self._numbers))

    def _pair_mask(self) -> Tuple[np.ndarray, np.ndarray]:
        """Member values and the upper-triangle mask of power-of-two sums."""
        values = self._values()
        sums = values[:, None] + values[None, :]
        return values, np.triu(is_power_of_two_array(sums), k=1)

    def count_pairs(self) -> int:
        """Number of unordered member pairs whose sum is a power of two."""
        if len(self._numbers) < 2:
            return 0
        _, mask = self._pair_mask()
        return int(np.count_nonzero(mask))

    def generate_pairs(self) -> List[PowerPair]:
        """All power pairs formed by the members, sorted."""
        if len(self._numbers) < 2:
            return []
        values, mask = self._pair_mask()
        rows, cols = np.nonzero(mask)
        return sorted(PowerPair(int(values[row]), int(values[col]))
                      for row, col in zip(rows, cols))

    def pair_degrees(self) -> Dict[int, int]:
        """Map each member to the number of members it forms a power pair with."""
        if not self._numbers:
            return {}
        values, mask = self._pair_mask()
        degrees = (mask | mask.T).sum(axis=1)
        return {int(value): int(degree) for value, degree in zip(values, degrees)}

    def simplify(self) -> None:
        """
        Halve every member while all of them are even.

        Stops as soon as a member is odd or the set holds at most one number.
        The pairs summing to a power of two are the same before and after.
        """
        while len(self._numbers) > 1 and all(number % 2 == 0 for number in self._numbers):
            self._numbers = {number // 2: None for number in self._numbers}
