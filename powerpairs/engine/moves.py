"""
Move rules for the local search.

A move rule looks at one number set and returns derived sets, each with
strictly more power pairs than the one it came from. The improver keeps
applying the rule to whatever it returns until nothing improves.

``worst_swap`` is the rule the search uses. ``best_swap`` explores more
swaps per step and is only used when explicitly selected.
"""

from collections import defaultdict
from typing import Callable, Dict, List, Tuple

import numpy as np

from ..core.number_set import NumberSet
from ..core.powers import PowerTable, is_power_of_two_array
from .errors import ConfigurationError

MoveRule = Callable[[NumberSet, PowerTable], List[NumberSet]]


def _worst_numbers(number_set: NumberSet) -> Tuple[int, List[int]]:
    """Lowest pair degree in the set and every member attaining it."""
    degrees = number_set.pair_degrees()
    worst_pair_count = min(degrees.values())
    return worst_pair_count, [number for number, degree in degrees.items()
                              if degree == worst_pair_count]


def worst_swap(number_set: NumberSet, powers: PowerTable) -> List[NumberSet]:
    """
    Replace one least-connected member by a better-connected outsider.

    Candidates are ``P - m`` for every power ``P`` and member ``m``. The first
    candidate that would pair with more of the remaining members than the
    worst member currently does replaces it. At most one set is returned.
    """
    if len(number_set) == 0:
        return []

    worst_pair_count, worst_numbers = _worst_numbers(number_set)
    members = number_set.numbers
    values = np.fromiter(members, dtype=np.int64, count=len(members))
    position = {number: index for index, number in enumerate(members)}

    for power in powers:
        for number in members:
            maybe_number = power - number
            if maybe_number in number_set:
                continue

            hits = is_power_of_two_array(values + maybe_number)
            total = int(np.count_nonzero(hits))
            for worst_number in worst_numbers:
                maybe_pair_count = total - int(hits[position[worst_number]])
                if maybe_pair_count > worst_pair_count:
                    return [number_set.replace(worst_number, maybe_number)]
    return []


def best_swap(number_set: NumberSet, powers: PowerTable) -> List[NumberSet]:
    """
    Swap the most promising outsiders in for the least-connected members.

    Every outsider ``P - m`` is scored by how many members it sums to a power
    of two with. Each pairing of a top-scoring outsider with a worst member
    that raises the total pair count yields one derived set.
    """
    if len(number_set) == 0:
        return []

    pair_count_per_number: Dict[int, int] = defaultdict(int)
    for power in powers:
        for number in number_set:
            pair_count_per_number[power - number] += 1

    better_pair_count = 0
    better_numbers: List[int] = []
    for number, count in sorted(pair_count_per_number.items()):
        if number in number_set:
            continue
        if count > better_pair_count:
            better_numbers = [number]
            better_pair_count = count
        elif count == better_pair_count:
            better_numbers.append(number)

    worst_pair_count, worst_numbers = _worst_numbers(number_set)
    if better_pair_count <= worst_pair_count:
        return []

    pair_count = number_set.count_pairs()
    improved_sets = []
    for better_number in better_numbers:
        for worst_number in worst_numbers:
            improved = number_set.replace(worst_number, better_number)
            if improved.count_pairs() > pair_count:
                improved_sets.append(improved)
    return improved_sets


MOVE_RULES: Dict[str, MoveRule] = {
    "worst_swap": worst_swap,
    "best_swap": best_swap,
}


def get_move_rule(name: str) -> MoveRule:
    """Look up a move rule by name."""
    try:
        return MOVE_RULES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown move rule: {name}",
            errors=[f"move_rule must be one of {sorted(MOVE_RULES)}"],
        ) from None
