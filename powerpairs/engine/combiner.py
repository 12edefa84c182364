"""
Combiners: the parallel work units of the search.

Each combiner owns one partition of the "triplets choose set size"
enumeration, identified by a fixed index prefix. It seeds a number set from
every combination of its partition and runs its own improver on it, so
combiners share nothing but the read-only triplet pool.
"""

import logging
from typing import List, Sequence, Tuple

from ..core.combinations import iter_combinations, iter_prefixes
from ..core.number_set import NumberSet
from ..core.powers import PowerTable, PowerTriplet
from .improver import Improver

logger = logging.getLogger(__name__)


class Combiner:
    """Enumerate one partition of triplet combinations and keep the best set."""

    def __init__(
        self,
        triplets: Sequence[PowerTriplet],
        set_size: int,
        powers: PowerTable,
        prefix: Sequence[int] = (),
        move_rule: str = "worst_swap",
    ):
        """
        Initialize combiner.

        Args:
            triplets: Shared triplet pool, never modified
            set_size: Number of integers in each candidate set
            powers: Powers of two used by the improver
            prefix: Fixed leading triplet indices of this partition
            move_rule: Move rule name for the improver
        """
        self.triplets = triplets
        self.number_set_size = set_size
        self.prefix: Tuple[int, ...] = tuple(prefix)
        self.improver = Improver(set_size, powers, move_rule)
        self.combination_count = 0

    def __repr__(self) -> str:
        return f"Combiner(prefix={self.prefix}, combinations={self.combination_count})"

    def combine(self) -> None:
        """Seed and improve a number set for every combination of the partition."""
        number_set = NumberSet(self.number_set_size)
        for indices in iter_combinations(len(self.triplets), self.number_set_size, self.prefix):
            self.combination_count += 1
            number_set.reset()
            for index in indices:
                number_set.add(self.triplets[index])
            self.improver.improve(number_set)

    def progress(self) -> Tuple[int, int]:
        """Snapshot of (best pair count, improvement count) for telemetry."""
        return self.improver.best_pair_count, self.improver.improvement_count


def generate_combiners(
    triplets: Sequence[PowerTriplet],
    set_size: int,
    levels: int,
    powers: PowerTable,
    move_rule: str = "worst_swap",
) -> List[Combiner]:
    """
    Split the enumeration into one combiner per prefix of length ``levels``.

    ``levels`` of zero gives a single combiner over the whole enumeration.
    """
    combiners = [
        Combiner(triplets, set_size, powers, prefix, move_rule)
        for prefix in iter_prefixes(len(triplets), set_size, levels)
    ]
    logger.info(f"Using {len(combiners)} combiners")
    return combiners
