"""Unit tests for the randomized duration fitter."""

import random
from collections import Counter

import pytest

from trip_tunes.db.models import FitConfig
from trip_tunes.exceptions import InvalidInputError
from trip_tunes.generator.fitter import DurationFitter, pack_greedy

from conftest import make_video


class ScriptedRandom(random.Random):
    """Random whose shuffle applies a scripted sequence of orders.

    Each entry is a list of video ids; once exhausted, shuffle is a no-op.
    """

    def __init__(self, orders: list[list[str]]) -> None:
        super().__init__(0)
        self.orders = list(orders)
        self.shuffles = 0

    def shuffle(self, x) -> None:
        self.shuffles += 1
        if not self.orders:
            return
        wanted = self.orders.pop(0)
        by_id = {item.id: item for item in x}
        x[:] = [by_id[i] for i in wanted]


def _pool(n: int, seed: int) -> list:
    rng = random.Random(seed)
    return [make_video(f"v{i}", rng.randint(120, 420)) for i in range(n)]


class TestPackGreedy:
    def test_accepts_in_order(self, three_videos):
        selected, total = pack_greedy(three_videos, 900)
        assert [v.id for v in selected] == ["a", "b"]
        assert total == 700

    def test_skips_instead_of_stopping(self):
        items = [make_video("long", 800), make_video("s1", 100), make_video("s2", 150)]
        selected, total = pack_greedy(items, 300)
        assert [v.id for v in selected] == ["s1", "s2"]
        assert total == 250

    def test_exact_fill(self):
        items = [make_video("x", 600)]
        selected, total = pack_greedy(items, 600)
        assert total == 600

    def test_nothing_fits(self):
        assert pack_greedy([make_video("x", 601)], 600) == ([], 0)


class TestDurationFitter:
    def test_rejects_non_positive_target(self, three_videos):
        with pytest.raises(InvalidInputError):
            DurationFitter().fit(three_videos, 0)
        with pytest.raises(InvalidInputError):
            DurationFitter().fit(three_videos, -60)

    def test_empty_items(self):
        result = DurationFitter().fit([], 900)
        assert result.items == []
        assert result.total_seconds == 0

    def test_all_items_too_long(self):
        items = [make_video("x", 1000), make_video("y", 2000)]
        result = DurationFitter(rng=random.Random(1)).fit(items, 900)
        assert result.items == []
        assert result.total_seconds == 0

    def test_single_item_equal_to_target(self):
        item = make_video("only", 900)
        result = DurationFitter(rng=random.Random(1)).fit([item], 900)
        assert result.items == [item]
        assert result.total_seconds == 900

    def test_finds_exact_combination(self, three_videos):
        """b + c is the only pair that fills 900 seconds exactly."""
        result = DurationFitter(rng=random.Random(7)).fit(three_videos, 900)
        assert result.total_seconds == 900
        assert sorted(v.id for v in result.items) == ["b", "c"]

    def test_keeps_best_attempt(self, three_videos):
        rng = ScriptedRandom([["a", "b", "c"], ["c", "a", "b"], ["a", "b", "c"]])
        config = FitConfig(max_attempts=3, tolerance_seconds=0)
        result = DurationFitter(config, rng).fit(three_videos, 900)
        # a+b = 700, c+a = 800, a+b = 700 -> 800 wins
        assert result.total_seconds == 800
        assert sorted(v.id for v in result.items) == ["a", "c"]

    def test_early_exit_within_tolerance(self, three_videos):
        rng = ScriptedRandom([["c", "a", "b"]])
        config = FitConfig(max_attempts=500, tolerance_seconds=100)
        result = DurationFitter(config, rng).fit(three_videos, 900)
        assert result.total_seconds == 800
        # One packing shuffle plus the final playback-order shuffle.
        assert rng.shuffles == 2

    def test_stops_at_attempt_budget(self, three_videos):
        rng = ScriptedRandom([])
        config = FitConfig(max_attempts=5, tolerance_seconds=0)
        DurationFitter(config, rng).fit(three_videos, 900)
        assert rng.shuffles == 5 + 1

    def test_playback_order_is_reshuffled(self, three_videos):
        rng = ScriptedRandom([["b", "c", "a"], ["c", "b"]])
        config = FitConfig(max_attempts=1)
        result = DurationFitter(config, rng).fit(three_videos, 900)
        assert [v.id for v in result.items] == ["c", "b"]

    def test_does_not_mutate_input(self, three_videos):
        before = list(three_videos)
        DurationFitter(rng=random.Random(3)).fit(three_videos, 900)
        assert three_videos == before


class TestFitterProperties:
    @pytest.mark.parametrize("seed", range(10))
    def test_never_exceeds_target(self, seed):
        items = _pool(25, seed)
        target = random.Random(seed).randint(300, 5000)
        result = DurationFitter(rng=random.Random(seed)).fit(items, target)
        assert result.total_seconds <= target

    @pytest.mark.parametrize("seed", range(10))
    def test_result_is_sub_multiset_with_exact_sum(self, seed):
        items = _pool(25, seed)
        # Duplicate entries are allowed in the input; they may each be used once.
        items = items + items[:3]
        result = DurationFitter(rng=random.Random(seed)).fit(items, 3600)
        picked = Counter(v.id for v in result.items)
        available = Counter(v.id for v in items)
        assert all(picked[k] <= available[k] for k in picked)
        assert result.total_seconds == sum(v.duration_seconds for v in result.items)

    def test_superset_not_worse(self):
        """More candidates should never do noticeably worse (best of several runs)."""
        subset = _pool(8, 11)
        superset = subset + _pool(12, 12)
        target = 1800

        def best_of(items, runs=5):
            return max(
                DurationFitter(rng=random.Random(run)).fit(items, target).total_seconds
                for run in range(runs)
            )

        assert best_of(superset) >= best_of(subset) - 60

    def test_close_to_target_with_rich_pool(self):
        items = _pool(40, 5)
        result = DurationFitter(rng=random.Random(5)).fit(items, 3600)
        assert 3600 - result.total_seconds <= 60
