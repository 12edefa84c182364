"""
Enumeration of k-subsets of a pool, as increasing index tuples.

The stepping rule is the lexicographic "N choose K" successor. Holding the
first positions fixed turns one enumeration into many disjoint partitions:
every prefix produced by :func:`iter_prefixes` is a work unit, and together
the units cover the full enumeration exactly once.
"""

from typing import Iterator, List, Sequence, Tuple


def next_combination(indices: List[int], pool_size: int, subset_size: int,
                     fixed: int = 0) -> bool:
    """
    Step ``indices`` in place to the next combination.

    Only positions at or after ``fixed`` move. ``indices`` may be shorter
    than ``subset_size`` (a prefix); the bound still leaves room for the
    remaining ``subset_size - len(indices)`` positions.

    Returns:
        False once no position can be incremented.
    """
    for position in range(len(indices) - 1, fixed - 1, -1):
        if indices[position] + 1 < pool_size - (subset_size - position - 1):
            indices[position] += 1
            for following in range(position + 1, len(indices)):
                indices[following] = indices[following - 1] + 1
            return True
    return False


def iter_combinations(pool_size: int, subset_size: int,
                      prefix: Sequence[int] = ()) -> Iterator[Tuple[int, ...]]:
    """
    Yield every ``subset_size`` combination of ``range(pool_size)`` that
    starts with ``prefix``.

    With an empty prefix this is the whole C(pool_size, subset_size)
    enumeration in lexicographic order.
    """
    if subset_size <= 0 or len(prefix) > subset_size:
        return

    indices = list(prefix) if prefix else [0]
    while len(indices) < subset_size:
        indices.append(indices[-1] + 1)
    if indices[-1] >= pool_size:
        return

    fixed = len(prefix)
    while True:
        yield tuple(indices)
        if not next_combination(indices, pool_size, subset_size, fixed):
            return


def iter_prefixes(pool_size: int, subset_size: int, levels: int) -> Iterator[Tuple[int, ...]]:
    """
    Yield the fixed prefixes of length ``levels`` partitioning the
    enumeration of ``subset_size`` combinations.

    ``levels`` is clamped to ``subset_size``; zero or less yields the single
    empty prefix, i.e. one unpartitioned work unit.
    """
    levels = min(levels, subset_size)
    if levels <= 0:
        yield ()
        return
    if pool_size < subset_size:
        return

    prefix = list(range(levels))
    while True:
        yield tuple(prefix)
        if not next_combination(prefix, pool_size, subset_size):
            return
