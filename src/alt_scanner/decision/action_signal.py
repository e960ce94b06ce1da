"""Action signals: buy now, wait for a dip, or skip."""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..core.enums import ActionDecision, Confidence
from ..core.models import CoinSnapshot, MarketConditions
from ..scoring.models import ScoreBreakdown

logger = logging.getLogger(__name__)

DEFAULT_DOMINANCE = 60.0


@dataclass(frozen=True)
class DecisionFactors:
    """Inputs the rule chain looks at."""

    momentum: float
    timing: float
    risk: float
    btc_dominance: float
    price_change_7d: float
    rank: int
    near_support: bool
    near_resistance: bool
    is_overheated: bool
    is_top_tier: bool
    has_liquidity: bool
    is_listed: bool


@dataclass
class ActionSignal:
    """Concrete recommendation with its execution details."""

    action: ActionDecision
    confidence: Confidence
    reasoning: List[str] = field(default_factory=list)
    entry_strategy: str = ""
    exit_strategy: str = ""
    position_size: str = "0%"
    timeframe: str = ""
    warnings: List[str] = field(default_factory=list)


Rule = Tuple[ActionDecision, Callable[[DecisionFactors], bool], Confidence]

# Evaluated in order, first match wins
RULES: List[Rule] = [
    (
        ActionDecision.BUY_NOW,
        lambda f: f.momentum > 65 and f.timing > 65 and f.risk < 50 and not f.is_overheated,
        Confidence.HIGH,
    ),
    (
        ActionDecision.BUY,
        lambda f: f.momentum > 55 and f.timing > 55 and f.risk < 60 and f.has_liquidity,
        Confidence.MEDIUM,
    ),
    (
        ActionDecision.WAIT_FOR_DIP,
        lambda f: f.momentum > 60 and (f.timing < 50 or f.is_overheated or f.near_resistance),
        Confidence.MEDIUM,
    ),
    (
        ActionDecision.WAIT_BETTER_TIMING,
        lambda f: f.momentum > 50 and f.timing < 40 and f.btc_dominance > 65,
        Confidence.MEDIUM,
    ),
    (
        ActionDecision.SKIP_HIGH_RISK,
        lambda f: f.risk > 70 or not f.is_listed or not f.has_liquidity,
        Confidence.HIGH,
    ),
    (
        ActionDecision.SKIP_WEAK,
        lambda f: f.momentum < 40 or (f.timing < 40 and f.momentum < 50),
        Confidence.HIGH,
    ),
]


def is_near_support(coin: CoinSnapshot) -> bool:
    """Within 5% of the value-area low or 3% of the point of control."""
    profile = coin.volume_profile
    if profile is None:
        return False
    price = coin.price
    return (
        abs(price - profile.value_area_low) / profile.value_area_low < 0.05
        or abs(price - profile.poc_price) / profile.poc_price < 0.03
    )


def is_near_resistance(coin: CoinSnapshot) -> bool:
    """Within 5% of the value-area high."""
    profile = coin.volume_profile
    if profile is None:
        return False
    return abs(coin.price - profile.value_area_high) / profile.value_area_high < 0.05


def estimate_good_entry(coin: CoinSnapshot) -> str:
    price = coin.price
    if coin.price_change_7d > 30:
        return f"${price * 0.8:.4f}"
    profile = coin.volume_profile
    if profile is not None and profile.poc_price < price:
        return f"${profile.poc_price:.4f} (POC level)"
    return f"${price * 0.9:.4f}"


class ActionSignalEngine:
    """Turns a scored coin into an actionable recommendation."""

    def __init__(self, rules: Optional[List[Rule]] = None):
        self.rules = rules or RULES

    def analyze_factors(
        self,
        coin: CoinSnapshot,
        score: ScoreBreakdown,
        market: Optional[MarketConditions] = None,
    ) -> DecisionFactors:
        return DecisionFactors(
            momentum=score.total_score,
            timing=score.timing.score,
            risk=score.risk_score,
            btc_dominance=market.btc_dominance if market else DEFAULT_DOMINANCE,
            price_change_7d=coin.price_change_7d,
            rank=coin.rank,
            near_support=is_near_support(coin),
            near_resistance=is_near_resistance(coin),
            is_overheated=coin.price_change_7d > 40,
            is_top_tier=coin.rank <= 50,
            has_liquidity=coin.volume_to_mcap > 0.03,
            is_listed=coin.is_listed,
        )

    def decide(self, factors: DecisionFactors) -> Tuple[ActionDecision, Confidence]:
        for action, predicate, confidence in self.rules:
            if predicate(factors):
                return action, confidence
        return ActionDecision.WATCH, Confidence.LOW

    def generate(
        self,
        coin: CoinSnapshot,
        score: ScoreBreakdown,
        market: Optional[MarketConditions] = None,
    ) -> ActionSignal:
        """Full action signal for one scored coin."""
        factors = self.analyze_factors(coin, score, market)
        action, confidence = self.decide(factors)
        signal = ActionSignal(action=action, confidence=confidence)
        self._fill_details(signal, factors, coin)
        logger.debug(f"{coin.symbol} action {action.value} ({confidence.value})")
        return signal

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    def _fill_details(self, s: ActionSignal, f: DecisionFactors, coin: CoinSnapshot) -> None:
        if s.action == ActionDecision.BUY_NOW:
            s.reasoning = [
                f"High momentum ({f.momentum:.0f}/100)",
                f"Excellent timing ({f.timing:.0f}/100)",
                f"Acceptable risk ({f.risk:.0f}/100)",
            ]
            s.entry_strategy = "Market order or limit slightly above the current price"
            s.exit_strategy = "Take profit: +25-40%, Stop loss: -15%"
            s.position_size = "3-5%" if f.is_top_tier else "2-4%"
            s.timeframe = "2-8 weeks"

        elif s.action == ActionDecision.BUY:
            s.reasoning = [
                f"Good momentum ({f.momentum:.0f}/100)",
                f"OK timing ({f.timing:.0f}/100)",
                "Fundamentals in order",
            ]
            s.entry_strategy = "Limit order at support or on a small dip"
            s.exit_strategy = "Take profit: +20-30%, Stop loss: -12%"
            s.position_size = "2-3%" if f.is_top_tier else "1-2%"
            s.timeframe = "3-10 weeks"

        elif s.action == ActionDecision.WAIT_FOR_DIP:
            s.reasoning = ["Good coin but possibly overheated"]
            if f.near_resistance:
                s.reasoning.append("Close to a resistance level")
            if f.is_overheated:
                s.reasoning.append(f"Large rally (+{f.price_change_7d:.1f}% this week)")
            s.entry_strategy = f"Wait for a drop to {estimate_good_entry(coin)}"
            s.exit_strategy = "Standard levels - depends on entry"
            s.position_size = "Prepare 2-4% but wait"
            s.timeframe = "Wait 1-3 weeks for a correction"
            s.warnings.append("Set price alerts instead of buying now")

        elif s.action == ActionDecision.WAIT_BETTER_TIMING:
            s.reasoning = [
                "Coin is fine but market conditions are weak",
                f"BTC dominance too high ({f.btc_dominance:.1f}%)",
                "Better to wait for alt season",
            ]
            s.entry_strategy = "Wait until BTC dominance drops below 58%"
            s.position_size = "0% for now - add to watchlist"
            s.timeframe = "Possibly several months"

        elif s.action == ActionDecision.SKIP_HIGH_RISK:
            if f.risk > 70:
                s.reasoning.append(f"Very high risk ({f.risk:.0f}/100)")
            if not f.is_listed:
                s.reasoning.append("Not listed on the reference exchange")
            if not f.has_liquidity:
                s.reasoning.append("Weak liquidity")
            if f.rank > 200:
                s.reasoning.append(f"Low rank (#{f.rank})")
            s.entry_strategy = "Do not enter"
            s.timeframe = "Find a better opportunity"
            s.warnings.append("Too many red flags - skip")

        elif s.action == ActionDecision.SKIP_WEAK:
            s.reasoning = [
                f"Weak momentum ({f.momentum:.0f}/100)",
                f"Poor timing ({f.timing:.0f}/100)",
                "No convincing signals",
            ]
            s.entry_strategy = "Do not enter"
            s.timeframe = "Look for other opportunities"

        else:
            s.reasoning = ["Mixed signals", "More data needed"]
            s.entry_strategy = "Watch, do not act"
            s.timeframe = "Wait for clearer signals"
