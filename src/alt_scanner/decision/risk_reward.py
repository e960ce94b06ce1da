"""Risk-reward estimation: how much can be gained against how much is risked."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.enums import Confidence, RiskRewardDecision
from ..core.models import CoinSnapshot, MarketConditions
from ..scoring.metrics import clamp
from ..scoring.models import ScoreBreakdown
from .action_signal import DEFAULT_DOMINANCE, is_near_resistance

logger = logging.getLogger(__name__)

MAX_REASONS = 3


@dataclass
class MoveEstimate:
    """Estimated move in percent with the reasons behind it."""

    percent: int
    reasons: List[str] = field(default_factory=list)
    confidence: Confidence = Confidence.LOW


@dataclass
class RiskRewardResult:
    upside: MoveEstimate
    downside: MoveEstimate
    ratio: float
    success_probability: float
    expected_gain: float
    expected_loss: float
    expected_value: float
    decision: RiskRewardDecision
    position_size: str
    confidence: Confidence
    summary: str
    timeframe: str = "30d"

    @property
    def is_positive(self) -> bool:
        return self.expected_value > 0


class RiskRewardEstimator:
    """Upside, downside, success probability and expected value of a setup."""

    def __init__(self, timeframe: str = "30d"):
        self.timeframe = timeframe

    def estimate(
        self,
        coin: CoinSnapshot,
        score: ScoreBreakdown,
        market: Optional[MarketConditions] = None,
    ) -> RiskRewardResult:
        dominance = market.btc_dominance if market else DEFAULT_DOMINANCE

        upside = self.estimate_upside(coin, score, dominance)
        downside = self.estimate_downside(coin, score, dominance)
        probability = self.success_probability(coin, score, dominance)

        expected_gain = upside.percent * probability
        expected_loss = downside.percent * (1 - probability)
        expected_value = round(expected_gain - expected_loss, 1)
        ratio = upside.percent / downside.percent

        decision, position_size, confidence = self.recommend(ratio, probability, expected_value)
        summary = (
            f"Risking {downside.percent}% to gain {upside.percent}% (1:{ratio:.1f}), "
            f"{probability * 100:.0f}% success probability, expected value {expected_value:+.1f}%"
        )

        return RiskRewardResult(
            upside=upside,
            downside=downside,
            ratio=ratio,
            success_probability=probability,
            expected_gain=round(expected_gain, 1),
            expected_loss=round(expected_loss, 1),
            expected_value=expected_value,
            decision=decision,
            position_size=position_size,
            confidence=confidence,
            summary=summary,
            timeframe=self.timeframe,
        )

    # ------------------------------------------------------------------
    # Upside / downside
    # ------------------------------------------------------------------

    def estimate_upside(self, coin: CoinSnapshot, score: ScoreBreakdown, dominance: float) -> MoveEstimate:
        momentum = score.total_score
        reasons: List[str] = []

        if momentum > 80:
            upside, reason = 40.0, "Extremely high momentum score"
        elif momentum > 70:
            upside, reason = 30.0, "High momentum score"
        elif momentum > 60:
            upside, reason = 22.0, "Good momentum score"
        elif momentum > 50:
            upside, reason = 15.0, "Average momentum"
        else:
            upside, reason = 8.0, "Weak momentum"
        reasons.append(reason)

        multiplier = score.timing.multiplier
        upside *= multiplier
        if multiplier > 1.0:
            reasons.append("Favourable market timing")
        elif multiplier < 1.0:
            reasons.append("Weak timing may cap the move")

        if dominance < 50:
            upside *= 1.4
            reasons.append("Alt season - extended potential")
        elif dominance > 65:
            upside *= 0.7
            reasons.append("BTC dominance limits altcoin potential")

        upside *= score.sector_multiplier
        if score.sector_multiplier > 1.0:
            reasons.append(f"{coin.sector} sector outperforming")
        elif score.sector_multiplier < 1.0:
            reasons.append(f"{coin.sector} sector lagging")

        profile = coin.volume_profile
        if profile is not None and abs(coin.price - profile.poc_price) / profile.poc_price < 0.05:
            upside *= 1.2
            reasons.append("Bounce from a support level")

        if coin.volume_to_mcap > 0.2:
            upside *= 1.15
            reasons.append("Very high volume confirms the move")
        elif coin.volume_to_mcap > 0.1:
            upside *= 1.1
            reasons.append("Good volume")

        upside = clamp(upside, 5, 80)

        if momentum > 70 and score.timing.score > 70 and coin.volume_to_mcap > 0.1:
            confidence = Confidence.HIGH
        elif momentum > 60 and score.timing.score > 60:
            confidence = Confidence.MEDIUM
        else:
            confidence = Confidence.LOW

        return MoveEstimate(percent=int(round(upside)), reasons=reasons[:MAX_REASONS], confidence=confidence)

    def estimate_downside(self, coin: CoinSnapshot, score: ScoreBreakdown, dominance: float) -> MoveEstimate:
        risk = score.risk_score
        reasons: List[str] = []

        downside = 15.0
        if risk > 80:
            downside = 35.0
            reasons.append("Very high project risk")
        elif risk > 70:
            downside = 28.0
            reasons.append("High risk")
        elif risk > 60:
            downside = 22.0
            reasons.append("Elevated risk")
        elif risk < 30:
            downside = 10.0
            reasons.append("Relatively safe project")

        if coin.rank > 200:
            downside += 10
            reasons.append(f"Low market-cap rank (#{coin.rank})")
        elif coin.rank <= 50:
            downside -= 3
            reasons.append("Top 50 - lower risk")

        if coin.volume_to_mcap < 0.02:
            downside += 8
            reasons.append("Low liquidity - hard to exit")
        elif coin.volume_to_mcap > 0.1:
            downside -= 3
            reasons.append("Good liquidity")

        if coin.price_change_7d > 50:
            downside += 12
            reasons.append(f"Possibly post-pump (+{coin.price_change_7d:.1f}% this week)")
        elif coin.price_change_7d > 30:
            downside += 6
            reasons.append("Large weekly rally - correction risk")

        if abs(coin.price_change_24h) > 20:
            downside += 5
            reasons.append(f"High volatility ({abs(coin.price_change_24h):.1f}% in 24h)")

        if not coin.is_listed:
            downside += 8
            reasons.append("Not on major exchanges")

        if dominance > 70:
            downside += 5
            reasons.append("BTC dominance - risk for altcoins")

        if is_near_resistance(coin):
            downside += 5
            reasons.append("Close to a resistance level")

        downside = clamp(downside, 8, 50)

        if risk > 70 or coin.volume_to_mcap < 0.02 or coin.rank > 200:
            confidence = Confidence.HIGH
        elif risk > 50 or coin.rank > 100:
            confidence = Confidence.MEDIUM
        else:
            confidence = Confidence.LOW

        return MoveEstimate(percent=int(round(downside)), reasons=reasons[:MAX_REASONS], confidence=confidence)

    # ------------------------------------------------------------------
    # Probability / recommendation
    # ------------------------------------------------------------------

    @staticmethod
    def success_probability(coin: CoinSnapshot, score: ScoreBreakdown, dominance: float) -> float:
        probability = 0.5
        momentum = score.total_score
        timing = score.timing.score
        risk = score.risk_score

        if momentum > 70:
            probability += 0.2
        elif momentum > 60:
            probability += 0.15
        elif momentum > 50:
            probability += 0.1
        elif momentum < 40:
            probability -= 0.15

        if timing > 70:
            probability += 0.15
        elif timing > 60:
            probability += 0.1
        elif timing < 30:
            probability -= 0.2
        elif timing < 40:
            probability -= 0.1

        if risk < 30:
            probability += 0.1
        elif risk > 70:
            probability -= 0.15

        if dominance < 50:
            probability += 0.1
        elif dominance > 70:
            probability -= 0.15

        if coin.rank <= 50:
            probability += 0.05
        elif coin.rank > 200:
            probability -= 0.1

        if coin.is_listed:
            probability += 0.05
        if coin.volume_to_mcap > 0.1:
            probability += 0.05

        return round(clamp(probability, 0.1, 0.9), 2)

    @staticmethod
    def recommend(ratio: float, probability: float, expected_value: float):
        """Return (decision, position size, confidence)."""
        if ratio >= 3 and probability > 0.65 and expected_value > 5:
            return RiskRewardDecision.EXCELLENT, "4-6%", Confidence.VERY_HIGH
        if ratio >= 2 and probability > 0.55 and expected_value > 2:
            return RiskRewardDecision.GOOD, "2-4%", Confidence.HIGH
        if ratio >= 1.5 and probability > 0.5 and expected_value > 0:
            return RiskRewardDecision.ACCEPTABLE, "1-2%", Confidence.MEDIUM
        if ratio < 1.5 or probability < 0.4 or expected_value < -2:
            return RiskRewardDecision.POOR, "0%", Confidence.HIGH
        return RiskRewardDecision.NEUTRAL, "0-1%", Confidence.LOW
