"""Accumulation detection: quiet price, heavy volume, whales buying."""

import logging
from typing import List, Optional

from ..core.enums import AccumulationCategory
from ..core.models import CoinSnapshot, WhaleActivity
from .metrics import average_true_range, tier_score_below
from .models import AccumulationResult

logger = logging.getLogger(__name__)

CONTRACTION_TIERS = ((0.5, 30), (0.6, 25), (0.7, 20), (0.8, 15), (0.9, 10), (1.0, 5))

# (min volume/mcap, max |24h change|, points)
ABSORPTION_TIERS = (
    (0.20, 2, 40),
    (0.15, 3, 35),
    (0.10, 4, 30),
    (0.08, 5, 25),
    (0.06, 6, 20),
    (0.04, 8, 15),
    (0.03, 10, 10),
    (0.02, 12, 5),
)

# (min buy pressure, max |24h change|, points)
WHALE_TIERS = (
    (0.70, 3, 30),
    (0.65, 4, 25),
    (0.60, 5, 20),
    (0.55, 7, 15),
    (0.50, 10, 10),
    (0.45, 15, 5),
)

CATEGORIES = (
    (80, AccumulationCategory.STRONG, "Strong accumulation - consider a position before the breakout"),
    (60, AccumulationCategory.MODERATE, "Moderate accumulation - watch closely"),
    (40, AccumulationCategory.WEAK, "Weak signals - may be an early phase"),
)


def _paired_tier(primary: float, secondary: float, tiers) -> float:
    for min_primary, max_secondary, points in tiers:
        if primary > min_primary and secondary < max_secondary:
            return points
    return 0.0


def volatility_contraction_score(coin: CoinSnapshot) -> float:
    """ATR(7) / ATR(14) contraction, 0-30."""
    if coin.candle_count < 14:
        return 0.0

    atr14 = average_true_range(coin.klines.iloc[-14:])
    if atr14 == 0:
        return 0.0
    atr7 = average_true_range(coin.klines.iloc[-7:])
    return tier_score_below(atr7 / atr14, CONTRACTION_TIERS)


def absorption_score(coin: CoinSnapshot) -> float:
    """High volume without a price move, 0-40."""
    return _paired_tier(coin.volume_to_mcap, abs(coin.price_change_24h), ABSORPTION_TIERS)


def whale_score(whales: Optional[WhaleActivity], price_change_24h: float) -> float:
    """Large-trade buy pressure with little price impact, 0-30."""
    if whales is None or whales.total_large_trades == 0:
        return 0.0
    return _paired_tier(whales.buy_pressure, abs(price_change_24h), WHALE_TIERS)


def _signals(total: float, volatility: float, absorption: float, whale: float, coin: CoinSnapshot) -> List[str]:
    signals: List[str] = []

    if total >= 80:
        signals.append("Strong accumulation - smart money loading positions")
    elif total >= 60:
        signals.append("Moderate accumulation - worth watching")

    if volatility >= 25:
        signals.append("Extreme volatility compression - breakout near")
    if absorption >= 30:
        signals.append("High absorption - big volume without a price move")
    if whale >= 25:
        signals.append("Whales accumulating - 65%+ of large trades are buys")
    if volatility >= 20 and whale >= 20:
        signals.append("Spring loading - calm before the storm")
    if absorption >= 25 and coin.price_change_7d < 5:
        signals.append("Hidden gem - accumulation under the radar")

    return signals


def analyze_accumulation(coin: CoinSnapshot) -> AccumulationResult:
    """Full accumulation analysis of one coin."""
    volatility = volatility_contraction_score(coin)
    absorption = absorption_score(coin)
    whale = whale_score(coin.whale_activity, coin.price_change_24h)
    total = volatility + absorption + whale

    category = AccumulationCategory.NONE
    recommendation = "No accumulation signals"
    for threshold, bucket, text in CATEGORIES:
        if total >= threshold:
            category, recommendation = bucket, text
            break

    atr_7d = None
    if coin.candle_count >= 7:
        atr_7d = average_true_range(coin.klines.iloc[-7:])

    whales = coin.whale_activity
    result = AccumulationResult(
        score=total,
        volatility_score=volatility,
        absorption_score=absorption,
        whale_score=whale,
        category=category,
        recommendation=recommendation,
        signals=_signals(total, volatility, absorption, whale, coin),
        atr_7d=atr_7d,
        large_trades=whales.total_large_trades if whales else 0,
        buy_pressure=whales.buy_pressure if whales else None,
    )
    logger.debug(f"{coin.symbol} accumulation {total:.0f} ({category.value})")
    return result
