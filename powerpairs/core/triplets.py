"""
Generation of power triplets: integers whose three pairwise sums are all
powers of two.

The search radius ``delta`` grows one step per round. For every power ``p``
and ``i`` in ``{delta, -delta}``, ``j = p - i`` is the partner of ``i`` and
every ``k`` within the radius is tried as the third member. Rounds continue
until enough unique triplets are found; the last round keeps all of its
matches, so the pool may be larger than requested.
"""

import logging
from typing import Iterator, List, Set

from .powers import PowerTable, PowerTriplet, is_power_of_two
from ..utils.timer import Duration

logger = logging.getLogger(__name__)

# Fraction of the sorted pool moved to the back, interleaving small and large
# magnitudes before the pool is cut into contiguous partitions.
ROTATION_NUMERATOR = 3
ROTATION_DENOMINATOR = 5

# Members grow with the radius; past this one their sums leave int64.
MAX_DELTA = 1 << 61


def _partners(i: int, delta: int) -> Iterator[int]:
    """Every ``k`` in ``[-delta, delta]`` for which ``i + k`` is a power of two."""
    power = 1
    while power - i <= delta:
        if power - i >= -delta:
            yield power - i
        power <<= 1


def _scan_radius(delta: int, powers: PowerTable, found: Set[PowerTriplet]) -> None:
    """Add every triplet whose first member is +delta or -delta."""
    for power in powers:
        for i in (delta, -delta):
            j = power - i
            if i == j:
                continue
            for k in _partners(i, delta):
                if k == 0 or k == i or k == j:
                    continue
                if is_power_of_two(j + k):
                    found.add(PowerTriplet(i, j, k))


def rotate_pool(triplets: List[PowerTriplet]) -> List[PowerTriplet]:
    """Rotate the pool left by three fifths of its length."""
    shift = len(triplets) * ROTATION_NUMERATOR // ROTATION_DENOMINATOR
    return triplets[shift:] + triplets[:shift]


def generate_power_triplets(target_count: int, powers: PowerTable) -> List[PowerTriplet]:
    """
    Generate at least ``target_count`` distinct power triplets.

    Args:
        target_count: Minimum number of triplets wanted
        powers: Powers of two candidate sums are drawn from; with 4 among
            them new triplets keep appearing as the radius grows

    Returns:
        Sorted triplets, rotated by three fifths of the pool size.
    """
    duration = Duration()
    found: Set[PowerTriplet] = set()

    delta = 0
    while len(found) < target_count:
        if delta >= MAX_DELTA:
            logger.warning(
                f"Stopped at radius {delta} with {len(found)} of {target_count} triplets"
            )
            break
        delta += 1
        _scan_radius(delta, powers, found)

    triplets = rotate_pool(sorted(found))
    logger.info(f"{len(triplets)} triplets in {duration.elapsed()}s")
    return triplets
