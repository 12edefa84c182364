"""
Starting sets for the simplified search mode.

Odd numbers d pair with 2 - d (their sum is 2) and with many other odd
numbers, so filling a set with ``d`` and ``2 - d`` already gives a good
seed. The offset delays when the negative partners start being added.
"""

from .number_set import NumberSet


def simple_number_set(set_size: int, negative_span: int = 20) -> NumberSet:
    """
    Build the best odd-number seed of ``set_size`` members.

    Args:
        set_size: Number of members wanted
        negative_span: Even offsets in ``[0, negative_span)`` are tried

    Returns:
        The fill with the most power pairs; earlier offsets win ties.
    """
    best = None
    best_pair_count = 0
    for offset in range(0, negative_span, 2):
        candidate = NumberSet(set_size)
        delta = 1
        while not candidate.is_filled():
            candidate.add(delta)
            if delta > offset:
                candidate.add(2 - delta)
            delta += 2
        pair_count = candidate.count_pairs()
        if best is None or pair_count > best_pair_count:
            best, best_pair_count = candidate, pair_count
    return best if best is not None else NumberSet(set_size)
