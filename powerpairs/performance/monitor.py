"""
Progress monitoring for a running search.

The monitor polls the shared claim counter at a fixed interval and reports
percent complete, elapsed time, and the best pair and improvement counts
seen in the most recently claimed batch of combiners. Those counts are read
while the workers are still writing them; they are approximate and only
ever displayed.
"""

import logging
import threading
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from ..engine.combiner import Combiner
from ..utils.timer import Duration

logger = logging.getLogger(__name__)


@dataclass
class ProgressSnapshot:
    """One progress reading."""

    percent: int
    elapsed: int
    best_pair_count: int
    max_improvement_count: int

    def __str__(self) -> str:
        return (f"{self.percent:3d}% {self.elapsed:5d}s {self.best_pair_count} pairs "
                f"{self.max_improvement_count} improvements")


class ProgressMonitor:
    """Poll combiner progress and render it."""

    def __init__(
        self,
        combiners: Sequence[Combiner],
        claimed: Callable[[], int],
        batch_size: int,
        interval: float = 0.1,
        skip_polls: int = 20,
        console: Optional[Console] = None,
    ):
        """
        Initialize progress monitor.

        Args:
            combiners: Combiners being run
            claimed: Returns how many combiners have been claimed so far
            batch_size: How many recently claimed combiners to sample
            interval: Seconds between polls
            skip_polls: Unchanged polls tolerated before refreshing anyway
            console: Render a rich progress bar here; log at DEBUG if None
        """
        self.combiners = combiners
        self.claimed = claimed
        self.batch_size = max(batch_size, 1)
        self.interval = interval
        self.skip_polls = skip_polls
        self.console = console

        self.duration = Duration()
        self.best_pair_count = 0
        self.max_improvement_count = 0
        self.snapshots_taken = 0

    def snapshot(self, percent: int) -> ProgressSnapshot:
        """Sample the latest batch of claimed combiners."""
        current = min(self.claimed(), len(self.combiners))
        for index in range(max(current - self.batch_size, 0), current):
            pair_count, improvement_count = self.combiners[index].progress()
            self.best_pair_count = max(self.best_pair_count, pair_count)
            self.max_improvement_count = max(self.max_improvement_count, improvement_count)
        self.snapshots_taken += 1
        return ProgressSnapshot(
            percent=percent,
            elapsed=self.duration.elapsed(),
            best_pair_count=self.best_pair_count,
            max_improvement_count=self.max_improvement_count,
        )

    def _create_progress(self) -> Progress:
        return Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            TextColumn("{task.fields[pairs]} pairs {task.fields[improvements]} improvements"),
            console=self.console,
            auto_refresh=False,
        )

    def run(self, finished: threading.Event) -> None:
        """
        Poll until every combiner is claimed or ``finished`` is set.

        Always ends with a 100% reading.
        """
        total = len(self.combiners)
        progress = self._create_progress() if self.console is not None else None

        with progress if progress is not None else nullcontext():
            task = None
            if progress is not None:
                task = progress.add_task("Searching", total=100, pairs=0, improvements=0)

            def show(snapshot: ProgressSnapshot) -> None:
                if progress is None:
                    logger.debug(str(snapshot))
                    return
                progress.update(task, completed=snapshot.percent,
                                pairs=snapshot.best_pair_count,
                                improvements=snapshot.max_improvement_count)
                progress.refresh()

            current_percent = 0
            skip_count = 0
            while not finished.wait(self.interval):
                which = self.claimed()
                if which >= total:
                    break
                percent = 100 * which // total
                if percent == current_percent:
                    skip_count += 1
                    if skip_count < self.skip_polls:
                        continue
                skip_count = 0
                current_percent = percent
                show(self.snapshot(percent))

            show(self.snapshot(100))
