"""Tests for the thread pool, the scheduler and the deterministic reduction."""

import threading
from types import SimpleNamespace

import pytest

from powerpairs.core.number_set import NumberSet
from powerpairs.engine.combiner import Combiner, generate_combiners
from powerpairs.engine.errors import WorkerError
from powerpairs.performance.parallel import (
    AtomicCounter,
    ParallelScheduler,
    WorkerPool,
    default_worker_count,
)


def quiet_scheduler(workers):
    return ParallelScheduler(max_workers=workers, progress_interval=0.01, show_progress=False)


def fake_combiner(pair_count, numbers):
    """Object exposing just what the reduction reads."""
    improver = SimpleNamespace(best_pair_count=pair_count,
                               best_number_set=NumberSet(len(numbers), numbers))
    return SimpleNamespace(improver=improver)


class FailingCombiner(Combiner):
    def combine(self):
        raise RuntimeError("boom")


class TestAtomicCounter:
    """Test fetch-and-increment under contention."""

    def test_sequential(self):
        counter = AtomicCounter()

        assert counter.fetch_add() == 0
        assert counter.fetch_add(2) == 1
        assert counter.load() == 3

    def test_claims_are_unique(self):
        counter = AtomicCounter()
        claimed = []
        lock = threading.Lock()

        def claim():
            mine = [counter.fetch_add() for _ in range(500)]
            with lock:
                claimed.extend(mine)

        threads = [threading.Thread(target=claim) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(claimed) == list(range(2000))
        assert counter.load() == 2000


class TestWorkerPool:
    """Test scoped thread ownership and error propagation."""

    def test_all_threads_joined(self):
        done = []
        with WorkerPool("test") as pool:
            for index in range(3):
                pool.spawn(lambda index=index: done.append(index))

        assert sorted(done) == [0, 1, 2]

    def test_error_reraised_after_join(self):
        finished = threading.Event()

        def slow():
            finished.wait(0.05)
            finished.set()

        def fail():
            raise ValueError("bad worker")

        with pytest.raises(WorkerError) as exc_info:
            with WorkerPool("test") as pool:
                pool.spawn(slow)
                pool.spawn(fail, name="failing")

        assert finished.is_set()
        assert exc_info.value.worker_name == "failing"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_worker_error_kept(self):
        def fail():
            raise WorkerError("already wrapped", combiner_index=7)

        with pytest.raises(WorkerError) as exc_info:
            with WorkerPool() as pool:
                pool.spawn(fail)

        assert exc_info.value.combiner_index == 7
        assert exc_info.value.message == "already wrapped"

    def test_default_worker_count(self):
        assert default_worker_count() >= 1


class TestParallelScheduler:
    """Test running combiners and reducing their results."""

    def test_empty(self):
        assert len(quiet_scheduler(2).run([])) == 0

    def test_runs_every_combiner(self, powers, triplet_pool):
        combiners = generate_combiners(triplet_pool, 3, 1, powers)
        quiet_scheduler(3).run(combiners)

        assert all(c.combination_count > 0 for c in combiners)

    def test_result_independent_of_worker_count(self, powers, triplet_pool):
        results = []
        for workers in (1, 2, 4):
            combiners = generate_combiners(triplet_pool, 4, 1, powers)
            results.append(quiet_scheduler(workers).run(combiners).sorted_numbers())

        assert results[0] == results[1] == results[2]

    def test_result_is_best_of_combiners(self, powers, triplet_pool):
        combiners = generate_combiners(triplet_pool, 4, 2, powers)
        best = quiet_scheduler(2).run(combiners)

        assert best.count_pairs() == max(c.improver.best_pair_count for c in combiners)

    def test_worker_failure(self, powers, triplet_pool):
        combiners = [FailingCombiner(triplet_pool, 3, powers)]

        with pytest.raises(WorkerError) as exc_info:
            quiet_scheduler(2).run(combiners)

        assert exc_info.value.combiner_index == 0
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_with_progress_bar(self, powers, triplet_pool):
        from io import StringIO
        from rich.console import Console

        scheduler = ParallelScheduler(max_workers=2, progress_interval=0.01,
                                      console=Console(file=StringIO()))
        combiners = generate_combiners(triplet_pool, 3, 1, powers)

        assert len(scheduler.run(combiners)) == 3


class TestReduce:
    """Test the deterministic reduction."""

    def test_first_maximum_wins(self):
        combiners = [
            fake_combiner(2, [1, 3, 7]),
            fake_combiner(3, [-1, 3, 5]),
            fake_combiner(3, [-3, 5, 11]),
        ]

        assert ParallelScheduler.reduce(combiners).sorted_numbers() == [-1, 3, 5]

    def test_result_simplified(self):
        combiners = [fake_combiner(4, [2, 6, -2, 10])]

        assert ParallelScheduler.reduce(combiners).sorted_numbers() == [-1, 1, 3, 5]

    def test_winner_left_untouched(self):
        combiners = [fake_combiner(4, [2, 6, -2, 10])]
        ParallelScheduler.reduce(combiners)

        assert combiners[0].improver.best_number_set.sorted_numbers() == [-2, 2, 6, 10]
