"""
Top-level search driver.

Two modes are offered:

* simplified: improve a single seed of odd numbers with one improver;
* search: generate a triplet pool, split its combinations over combiners and
  run them in parallel.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .config import SearchConfig
from .core.number_set import NumberSet
from .core.powers import PowerPair
from .core.seeds import simple_number_set
from .core.triplets import generate_power_triplets
from .engine.combiner import generate_combiners
from .engine.improver import Improver
from .performance.parallel import ParallelScheduler
from .utils.logging_setup import log_operation
from .utils.timer import Duration

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Outcome of the search for one set size."""

    mode: str
    set_size: int
    number_set: NumberSet
    elapsed: int = 0
    triplet_count: int = 0
    triplet_seconds: int = 0
    combiner_count: int = 0
    combination_count: int = 0
    improvement_count: int = 0
    pairs: List[PowerPair] = field(default_factory=list)

    def __post_init__(self):
        if not self.pairs:
            self.pairs = self.number_set.generate_pairs()

    @property
    def pair_count(self) -> int:
        return len(self.pairs)


class PowerPairSearch:
    """Run either search mode with one configuration."""

    def __init__(self, config: Optional[SearchConfig] = None,
                 scheduler: Optional[ParallelScheduler] = None):
        """
        Initialize search.

        Args:
            config: Search configuration (defaults if None)
            scheduler: Scheduler for search mode (built from config if None)
        """
        self.config = config or SearchConfig()
        self.powers = self.config.power_table()
        self.scheduler = scheduler or ParallelScheduler(
            max_workers=self.config.workers,
            progress_interval=self.config.progress_interval,
            progress_skip_polls=self.config.progress_skip_polls,
            show_progress=self.config.show_progress,
        )

    def simplified(self, set_size: int) -> SearchResult:
        """Improve the odd-number seed of ``set_size`` members."""
        log_operation(logger, "simplified", set_size=set_size)
        duration = Duration()

        seed = simple_number_set(set_size, self.config.simplified_negative_span)
        improver = Improver(set_size, self.powers, self.config.move_rule)
        improver.improve(seed)

        return SearchResult(
            mode="simplified",
            set_size=set_size,
            number_set=improver.best_number_set,
            elapsed=duration.elapsed(),
            improvement_count=improver.improvement_count,
        )

    def search(self, triplet_count: int, combiner_levels: int, set_size: int) -> SearchResult:
        """
        Search combinations of power triplets for the best set.

        Args:
            triplet_count: Minimum size of the triplet pool
            combiner_levels: Prefix length used to partition the work
            set_size: Number of integers in the set
        """
        log_operation(logger, "search", set_size=set_size,
                      triplet_count=triplet_count, combiner_levels=combiner_levels)
        duration = Duration()

        triplets = generate_power_triplets(triplet_count, self.powers)
        triplet_seconds = duration.elapsed()

        combiners = generate_combiners(triplets, set_size, combiner_levels,
                                       self.powers, self.config.move_rule)
        if combiners:
            number_set = self.scheduler.run(combiners)
        else:
            logger.warning(f"{len(triplets)} triplets cannot fill a set of {set_size}")
            number_set = NumberSet(set_size)

        combination_count = sum(combiner.combination_count for combiner in combiners)
        improvement_count = sum(combiner.improver.improvement_count for combiner in combiners)
        logger.info(f"Tried {combination_count} combinations with "
                    f"{number_set.improvement_count} improvements")

        return SearchResult(
            mode="search",
            set_size=set_size,
            number_set=number_set,
            elapsed=duration.elapsed(),
            triplet_count=len(triplets),
            triplet_seconds=triplet_seconds,
            combiner_count=len(combiners),
            combination_count=combination_count,
            improvement_count=improvement_count,
        )

    def run_simplified(self, min_set_size: int, max_set_size: int) -> Iterator[SearchResult]:
        for set_size in range(min_set_size, max_set_size + 1):
            yield self.simplified(set_size)

    def run_search(self, triplet_count: int, combiner_levels: int,
                   min_set_size: int, max_set_size: int) -> Iterator[SearchResult]:
        for set_size in range(min_set_size, max_set_size + 1):
            yield self.search(triplet_count, combiner_levels, set_size)
