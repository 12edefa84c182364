"""
Parallel execution of combiners.

Worker threads claim combiners one at a time from a shared counter and run
each claimed combiner to completion. A monitor thread shows progress while
they run. Once every thread is joined, the best set is reduced in combiner
order, which keeps the result independent of thread scheduling.
"""

import logging
import multiprocessing as mp
import sys
import threading
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from ..core.number_set import NumberSet
from ..engine.combiner import Combiner
from ..engine.errors import WorkerError
from .monitor import ProgressMonitor

logger = logging.getLogger(__name__)


class AtomicCounter:
    """Integer counter with an atomic fetch-and-increment."""

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def fetch_add(self, amount: int = 1) -> int:
        """Add ``amount`` and return the value held before the addition."""
        with self._lock:
            previous = self._value
            self._value += amount
            return previous

    def load(self) -> int:
        with self._lock:
            return self._value


class WorkerPool:
    """
    Scoped owner of a group of threads.

    Threads are started with :meth:`spawn` and all of them are joined when
    the ``with`` block exits, whatever the exit path. The first exception
    raised inside a thread is re-raised as a :class:`WorkerError` after the
    join.
    """

    def __init__(self, name: str = "worker"):
        self.name = name
        self._threads: List[threading.Thread] = []
        self._errors: List[WorkerError] = []
        self._errors_lock = threading.Lock()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.join()
        if exc_type is None and self._errors:
            raise self._errors[0]
        return False

    @property
    def errors(self) -> List[WorkerError]:
        with self._errors_lock:
            return list(self._errors)

    def spawn(self, target: Callable[[], None], name: Optional[str] = None) -> threading.Thread:
        """Start a thread running ``target``."""
        thread_name = name or f"{self.name}-{len(self._threads)}"

        def run():
            try:
                target()
            except Exception as e:
                logger.error(f"Thread {thread_name} failed: {e}")
                if isinstance(e, WorkerError):
                    error = e
                else:
                    error = WorkerError(f"{thread_name} failed: {e}", worker_name=thread_name)
                    error.__cause__ = e
                with self._errors_lock:
                    self._errors.append(error)

        thread = threading.Thread(target=run, name=thread_name, daemon=True)
        self._threads.append(thread)
        thread.start()
        return thread

    def join(self) -> None:
        for thread in self._threads:
            thread.join()


def default_worker_count() -> int:
    """One thread per CPU, leaving one for the monitor; at least one."""
    return max(mp.cpu_count() - 1, 1)


class ParallelScheduler:
    """
    Run combiners on worker threads and reduce them to the best number set.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        progress_interval: float = 0.1,
        progress_skip_polls: int = 20,
        show_progress: bool = True,
        console: Optional[Console] = None,
    ):
        """
        Initialize scheduler.

        Args:
            max_workers: Number of worker threads (default: CPU count - 1)
            progress_interval: Seconds between progress polls
            progress_skip_polls: Polls without a percent change before the
                display is refreshed anyway
            show_progress: Render a live progress bar on stderr
            console: Console for the progress bar
        """
        self.max_workers = max_workers or default_worker_count()
        self.progress_interval = progress_interval
        self.progress_skip_polls = progress_skip_polls
        self.show_progress = show_progress
        self.console = console or Console(file=sys.stderr)

    def run(self, combiners: Sequence[Combiner]) -> NumberSet:
        """
        Run every combiner and return the best number set, simplified.

        Ties go to the combiner with the lowest index.
        """
        if not combiners:
            return NumberSet(0)

        next_to_do = AtomicCounter()
        finished = threading.Event()

        def work():
            while True:
                which = next_to_do.fetch_add(1)
                if which >= len(combiners):
                    break
                try:
                    combiners[which].combine()
                except Exception as e:
                    raise WorkerError(
                        f"Combiner {which} failed: {e}",
                        worker_name=threading.current_thread().name,
                        combiner_index=which,
                    ) from e

        monitor = ProgressMonitor(
            combiners,
            next_to_do.load,
            batch_size=self.max_workers,
            interval=self.progress_interval,
            skip_polls=self.progress_skip_polls,
            console=self.console if self.show_progress else None,
        )

        logger.info(f"Running {len(combiners)} combiners on {self.max_workers} threads")
        with WorkerPool("monitor") as monitor_pool:
            monitor_pool.spawn(lambda: monitor.run(finished))
            try:
                with WorkerPool("combiner") as workers:
                    for _ in range(self.max_workers):
                        workers.spawn(work)
            finally:
                finished.set()

        return self.reduce(combiners)

    @staticmethod
    def reduce(combiners: Sequence[Combiner]) -> NumberSet:
        """Pick the first combiner with the most pairs and simplify its set."""
        if not combiners:
            return NumberSet(0)
        winner = max(range(len(combiners)),
                     key=lambda index: combiners[index].improver.best_pair_count)
        best_number_set = combiners[winner].improver.best_number_set.copy()
        best_number_set.simplify()
        logger.debug(f"Combiner {winner} wins with "
                     f"{combiners[winner].improver.best_pair_count} pairs")
        return best_number_set
