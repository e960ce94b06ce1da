"""Unit tests for the scoring metric primitives."""

import math

import pytest

from alt_scanner.scoring.metrics import (
    average_true_range,
    clamp,
    nearest_round_number,
    pct_distance,
    simple_moving_average,
    smoothed_score,
    tier_score,
    tier_score_below,
    trend_stability_bonus,
)


class TestTierHelpers:
    def test_clamp(self):
        assert clamp(120, 0, 100) == 100
        assert clamp(-5, 0, 100) == 0
        assert clamp(42.5, 0, 100) == 42.5

    def test_tier_score_first_match_wins(self):
        tiers = ((20, 1), (10, 2), (0, 3))
        assert tier_score(25, tiers) == 1
        assert tier_score(15, tiers) == 2
        assert tier_score(5, tiers) == 3

    def test_tier_score_threshold_is_exclusive(self):
        assert tier_score(10, ((10, 5),), default=-1) == -1

    def test_tier_score_below(self):
        tiers = ((5, 15), (10, 10), (15, 5))
        assert tier_score_below(3, tiers) == 15
        assert tier_score_below(7, tiers) == 10
        assert tier_score_below(15, tiers) == 0

    def test_smoothed_score(self):
        assert smoothed_score(35, 70, 40) == pytest.approx(20)
        assert smoothed_score(140, 70, 40) == 40
        assert smoothed_score(-10, 70, 40) == 0
        assert smoothed_score(10, 0, 40) == 0


class TestKlineMetrics:
    def test_average_true_range_flat_candles(self, make_klines):
        klines = make_klines([100] * 10)
        # high 102, low 98, previous close 100
        assert average_true_range(klines) == pytest.approx(4.0)

    def test_average_true_range_needs_two_candles(self, make_klines):
        assert average_true_range(make_klines([100])) == 0.0
        assert average_true_range(None) == 0.0

    def test_simple_moving_average(self, make_klines):
        klines = make_klines(range(1, 21))
        assert simple_moving_average(klines, 14) == pytest.approx(13.5)
        assert simple_moving_average(klines, 30) is None

    def test_trend_stability_bonus_steady(self, make_klines):
        assert trend_stability_bonus(make_klines([100] * 10)) == 15

    def test_trend_stability_bonus_choppy(self, make_klines):
        klines = make_klines([100, 130, 100, 130, 100, 130, 100, 130])
        assert trend_stability_bonus(klines) == 0

    def test_trend_stability_bonus_short_history(self, make_klines):
        assert trend_stability_bonus(make_klines([100] * 6)) == 0


class TestPriceLevels:
    def test_nearest_round_number_just_below_level(self):
        assert nearest_round_number(0.95) == 1.0
        assert nearest_round_number(0.23) == 0.25

    def test_nearest_round_number_at_or_far_from_level(self):
        assert nearest_round_number(1.0) is None
        assert nearest_round_number(1.2) is None

    def test_pct_distance(self):
        assert pct_distance(105, 100) == pytest.approx(5.0)
        assert pct_distance(95, 100) == pytest.approx(5.0)
        assert math.isinf(pct_distance(1, 0))
