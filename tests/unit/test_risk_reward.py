"""Unit tests for the risk-reward estimator."""

import pytest

from alt_scanner.core.enums import (
    AccumulationCategory, Category, Confidence, RiskRewardDecision, TimingAction,
)
from alt_scanner.core.models import MarketConditions, VolumeProfile
from alt_scanner.decision.risk_reward import RiskRewardEstimator
from alt_scanner.scoring.models import AccumulationResult, ScoreBreakdown, TimingResult


def _score(total=55.0, risk=40.0, timing=50, multiplier=1.0, sector_multiplier=1.0):
    return ScoreBreakdown(
        symbol="ARB",
        price_score=20.0,
        volume_score=40.0,
        position_score=40.0,
        risk_score=risk,
        dev_score=0.0,
        dex_score=0.0,
        structure_score=0.0,
        flow_score=50.0,
        accumulation=AccumulationResult(
            score=0, volatility_score=0, absorption_score=0, whale_score=0,
            category=AccumulationCategory.NONE, recommendation="No accumulation signals",
        ),
        timing=TimingResult(
            score=timing, macro=50, coin=50, sector=50, technical=50,
            action=TimingAction.WAIT_FOR_BETTER, confidence=Confidence.LOW, multiplier=multiplier,
        ),
        raw_strength=30.0,
        quality_multiplier=1.0,
        sector_multiplier=sector_multiplier,
        total_score=total,
        category=Category.PROMISING,
    )


class TestUpsideDownside:
    def setup_method(self):
        self.estimator = RiskRewardEstimator()

    def test_upside_tiers(self, make_snapshot):
        coin = make_snapshot()
        assert self.estimator.estimate_upside(coin, _score(total=85), 60).percent == 40
        assert self.estimator.estimate_upside(coin, _score(total=65), 60).percent == 22
        assert self.estimator.estimate_upside(coin, _score(total=30), 60).percent == 8

    def test_upside_dominance_regime(self, make_snapshot):
        coin = make_snapshot()
        assert self.estimator.estimate_upside(coin, _score(total=85), 45).percent == 56
        assert self.estimator.estimate_upside(coin, _score(total=85), 70).percent == 28

    def test_upside_uses_timing_and_sector_multipliers(self, make_snapshot):
        coin = make_snapshot()
        boosted = _score(total=55, multiplier=1.2, sector_multiplier=1.15)
        # 15 * 1.2 * 1.15
        assert self.estimator.estimate_upside(coin, boosted, 60).percent == 21

    def test_upside_is_clamped(self, make_snapshot):
        coin = make_snapshot(
            volume_to_mcap=0.25,
            volume_profile=VolumeProfile(poc_price=1.2, value_area_low=1.1, value_area_high=1.3),
        )
        score = _score(total=85, multiplier=1.3, sector_multiplier=1.15)
        assert self.estimator.estimate_upside(coin, score, 45).percent == 80

    def test_downside_low_risk_top_coin(self, make_snapshot):
        assert self.estimator.estimate_downside(make_snapshot(), _score(risk=40), 60).percent == 12

    def test_downside_is_clamped(self, make_snapshot):
        coin = make_snapshot(rank=250, volume_to_mcap=0.01, price_change_7d=60, price_change_24h=25)
        estimate = self.estimator.estimate_downside(coin, _score(risk=90), 75)
        assert estimate.percent == 50
        assert estimate.confidence == Confidence.HIGH


class TestProbabilityAndDecision:
    def test_probability_is_capped(self, make_snapshot):
        p = RiskRewardEstimator.success_probability(make_snapshot(), _score(total=75, risk=20, timing=75), 45)
        assert p == 0.9

    def test_very_poor_timing_checked_first(self, make_snapshot):
        coin = make_snapshot(rank=100)
        assert RiskRewardEstimator.success_probability(coin, _score(total=45, risk=50, timing=25), 60) == 0.35
        assert RiskRewardEstimator.success_probability(coin, _score(total=45, risk=50, timing=35), 60) == 0.45

    @pytest.mark.parametrize("ratio, probability, ev, expected", [
        (3.5, 0.7, 10, (RiskRewardDecision.EXCELLENT, "4-6%", Confidence.VERY_HIGH)),
        (2.2, 0.6, 3, (RiskRewardDecision.GOOD, "2-4%", Confidence.HIGH)),
        (1.6, 0.52, 0.5, (RiskRewardDecision.ACCEPTABLE, "1-2%", Confidence.MEDIUM)),
        (1.2, 0.6, 1, (RiskRewardDecision.POOR, "0%", Confidence.HIGH)),
        (1.6, 0.45, -1, (RiskRewardDecision.NEUTRAL, "0-1%", Confidence.LOW)),
    ])
    def test_recommend(self, ratio, probability, ev, expected):
        assert RiskRewardEstimator.recommend(ratio, probability, ev) == expected


class TestEstimate:
    def test_expected_value(self, make_snapshot):
        coin = make_snapshot()
        result = RiskRewardEstimator().estimate(coin, _score(total=85, risk=40, timing=50),
                                                MarketConditions(btc_dominance=60))
        p = result.success_probability

        assert result.upside.percent == 40
        assert result.downside.percent == 12
        assert result.ratio == pytest.approx(40 / 12)
        assert result.expected_value == pytest.approx(round(40 * p - 12 * (1 - p), 1))
        assert result.is_positive
        assert result.timeframe == "30d"
        assert "Risking 12% to gain 40%" in result.summary
