"""Tests for combiners and their generation."""

import math

from powerpairs.core.combinations import iter_combinations
from powerpairs.core.number_set import NumberSet
from powerpairs.engine.combiner import Combiner, generate_combiners
from powerpairs.engine.improver import Improver


class TestCombiner:
    """Test a single combiner run."""

    def test_runs_every_combination(self, powers, triplet_pool):
        pool = triplet_pool[:5]
        combiner = Combiner(pool, 3, powers)
        combiner.combine()

        assert combiner.combination_count == math.comb(5, 3)

    def test_best_set(self, powers, triplet_pool):
        combiner = Combiner(triplet_pool, 4, powers)
        combiner.combine()

        best_pair_count, improvement_count = combiner.progress()
        assert len(combiner.improver.best_number_set) == 4
        assert best_pair_count == combiner.improver.best_number_set.count_pairs()
        assert best_pair_count >= 3
        assert improvement_count == combiner.improver.improvement_count

    def test_prefix_restricts_partition(self, powers, triplet_pool):
        pool = triplet_pool[:5]
        combiner = Combiner(pool, 3, powers, prefix=(1,))
        combiner.combine()

        assert combiner.combination_count == math.comb(3, 2)

    def test_pool_too_small(self, powers, triplet_pool):
        combiner = Combiner(triplet_pool[:2], 3, powers)
        combiner.combine()

        assert combiner.combination_count == 0
        assert combiner.progress() == (0, 0)


class TestGenerateCombiners:
    """Test partitioning of the enumeration into combiners."""

    def test_zero_levels(self, powers, triplet_pool):
        combiners = generate_combiners(triplet_pool, 3, 0, powers)

        assert len(combiners) == 1
        assert combiners[0].prefix == ()

    def test_one_level(self, powers, triplet_pool):
        pool = triplet_pool[:5]
        combiners = generate_combiners(pool, 3, 1, powers)

        assert [c.prefix for c in combiners] == [(0,), (1,), (2,)]

    def test_partitions_cover_all_combinations(self, powers, triplet_pool):
        pool = triplet_pool[:5]
        combiners = generate_combiners(pool, 3, 2, powers)
        for combiner in combiners:
            combiner.combine()

        assert sum(c.combination_count for c in combiners) == math.comb(5, 3)

    def test_no_combiners_when_pool_too_small(self, powers, triplet_pool):
        assert generate_combiners(triplet_pool[:2], 3, 1, powers) == []

    def test_move_rule_passed_on(self, powers, triplet_pool):
        combiners = generate_combiners(triplet_pool, 3, 1, powers, move_rule="best_swap")
        assert all(c.improver.move_rule_name == "best_swap" for c in combiners)


class TestSearchScenario:
    """Five triplets, no partitioning, sets of three."""

    def test_single_combiner_over_ten_subsets(self, powers, triplet_pool):
        pool = triplet_pool[:5]
        combiners = generate_combiners(pool, 3, 0, powers)

        assert len(combiners) == 1
        combiners[0].combine()
        assert combiners[0].combination_count == 10

    def test_best_is_achieved_by_some_subset(self, powers, triplet_pool):
        pool = triplet_pool[:5]
        combiner = Combiner(pool, 3, powers)
        combiner.combine()

        achieved = set()
        for indices in iter_combinations(5, 3):
            seed = NumberSet(3)
            for index in indices:
                seed.add(pool[index])
            improver = Improver(3, powers)
            improver.improve(seed)
            achieved.add(improver.best_pair_count)

        assert combiner.improver.best_pair_count == max(achieved)
