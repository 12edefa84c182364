"""
Local search over number sets.

The improver keeps a stack of candidate sets. Each popped candidate is
compared to the best set seen so far, then handed to the move rule; every
derived set has strictly more power pairs than its parent, so the search
terminates after at most C(n, 2) accepted moves along any branch.
"""

import logging
from typing import List

from ..core.number_set import NumberSet
from ..core.powers import PowerTable
from .moves import MoveRule, get_move_rule

logger = logging.getLogger(__name__)


class Improver:
    """
    Improve number sets and keep only the best one found.

    Results accumulate across calls to :meth:`improve`; read them from
    ``best_number_set``, ``best_pair_count`` and ``improvement_count``.
    """

    def __init__(self, set_size: int, powers: PowerTable, move_rule: str = "worst_swap"):
        """
        Initialize improver.

        Args:
            set_size: Size of the number sets being improved
            powers: Powers of two replacement candidates are derived from
            move_rule: Name of the move rule (see ``MOVE_RULES``)
        """
        self.powers = powers
        self.move_rule_name = move_rule
        self._move_rule: MoveRule = get_move_rule(move_rule)

        self.best_number_set = NumberSet(set_size)
        self.best_pair_count = 0
        self.improvement_count = 0
        self._has_best = False
        self._pending: List[NumberSet] = []

    def improve(self, number_set: NumberSet) -> None:
        """Run the local search starting from ``number_set``."""
        self._pending.append(number_set.copy())

        while self._pending:
            candidate = self._pending.pop()
            self._update_best(candidate)
            for improved in self._move_rule(candidate, self.powers):
                improved.improvement_count += 1
                self.improvement_count += 1
                self._pending.append(improved)

    def _update_best(self, number_set: NumberSet) -> None:
        pair_count = number_set.count_pairs()
        if pair_count > self.best_pair_count or not self._has_best:
            self.best_number_set = number_set
            self.best_pair_count = pair_count
            self._has_best = True
            logger.debug(f"New best: {pair_count} pairs in {number_set.sorted_numbers()}")
