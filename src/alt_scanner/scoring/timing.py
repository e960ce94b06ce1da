"""Entry timing: is now a good moment to enter this coin?

Four sub-scores, each starting from a neutral 50 and clamped to 0-100:

- macro: BTC dominance regime, contrarian fear & greed, dominance trend,
  altcoin-season index and ETH/BTC trend
- coin: overheated or oversold weekly move, daily volatility, relative volume
- sector: sector-wide weekly performance, acceleration, leader/laggard
- technical: volume-profile levels and smart-volume composition
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..core.enums import Confidence, TimingAction, TrendDirection
from ..core.models import CoinSnapshot, MarketConditions
from .metrics import clamp, pct_distance
from .models import TimingResult

logger = logging.getLogger(__name__)

NEUTRAL = 50.0
SECTOR_MIN_COINS = 3

WEIGHTS = {"macro": 0.3, "coin": 0.3, "sector": 0.2, "technical": 0.2}

ETH_BTC_ADJUSTMENTS: Dict[TrendDirection, float] = {
    TrendDirection.STRONG_UP: 20,
    TrendDirection.UP: 10,
    TrendDirection.SIDEWAYS: 0,
    TrendDirection.DOWN: -10,
    TrendDirection.STRONG_DOWN: -20,
}

# (score above, action, confidence), first match wins
RECOMMENDATIONS = (
    (75, TimingAction.BUY_NOW, Confidence.HIGH),
    (60, TimingAction.GOOD_TO_BUY, Confidence.MEDIUM),
    (40, TimingAction.WAIT_FOR_BETTER, Confidence.LOW),
)

BOOST_TIERS = ((80, 1.3), (70, 1.2), (60, 1.1))
PENALTY_TIERS = ((30, 0.7), (40, 0.8), (50, 0.9))


def macro_timing(market: Optional[MarketConditions]) -> float:
    if market is None:
        return NEUTRAL

    score = NEUTRAL
    dominance = market.btc_dominance
    if dominance < 45:
        score += 25
    elif dominance < 52:
        score += 15
    elif dominance < 58:
        score += 10
    elif dominance > 68:
        score -= 20
    elif dominance > 62:
        score -= 10

    # Contrarian: fear is opportunity
    if market.fear_greed is not None:
        fng = market.fear_greed.value
        if fng < 20:
            score += 15
        elif fng < 35:
            score += 10
        elif fng > 80:
            score -= 20
        elif fng > 70:
            score -= 10

    change = market.dominance_change_24h
    if change is not None:
        if change < -1:
            score += 10
        elif change > 1:
            score -= 10

    index = market.altcoin_season_index
    if index is not None:
        if index > 75:
            score += 25
        elif index > 50:
            score += 10
        elif index < 25:
            score -= 25

    if market.eth_btc_trend is not None:
        score += ETH_BTC_ADJUSTMENTS[market.eth_btc_trend]

    return clamp(score, 0.0, 100.0)


def coin_timing(coin: CoinSnapshot) -> float:
    score = NEUTRAL
    change_7d = coin.price_change_7d
    abs_24h = abs(coin.price_change_24h)

    if change_7d > 50:
        score -= 25
    elif change_7d > 30:
        score -= 15
    elif change_7d > 15:
        score -= 5

    if change_7d < -30:
        score += 20
    elif change_7d < -15:
        score += 10

    if abs_24h > 25:
        score -= 15
    elif abs_24h < 5 and abs(change_7d) < 10:
        score += 10

    if coin.volume_to_mcap > 0.2:
        score += 15
    elif coin.volume_to_mcap < 0.02:
        score -= 10

    return clamp(score, 0.0, 100.0)


def sector_timing(coin: CoinSnapshot, peers: Sequence[CoinSnapshot]) -> float:
    """Sector momentum; peers is the whole scanned set, coin included."""
    if not coin.sector or coin.sector == "Unknown":
        return NEUTRAL

    sector_coins = [c for c in peers if c.sector == coin.sector]
    if len(sector_coins) < SECTOR_MIN_COINS:
        return NEUTRAL

    mean_7d = sum(c.price_change_7d for c in sector_coins) / len(sector_coins)
    mean_24h = sum(c.price_change_24h for c in sector_coins) / len(sector_coins)

    score = NEUTRAL
    if mean_7d > 20:
        score += 25
    elif mean_7d > 10:
        score += 15
    elif mean_7d < -15:
        score -= 20
    elif mean_7d < -5:
        score -= 10

    # Accelerating: last day beats the average day of the week
    if mean_24h > mean_7d / 7 and mean_7d > 5:
        score += 15
    # Decelerating after a strong week
    if mean_24h < 0 and mean_7d > 10:
        score -= 15

    relative = coin.price_change_7d - mean_7d
    if relative < -10:
        score += 10
    elif relative > 15:
        score -= 10

    return clamp(score, 0.0, 100.0)


def technical_timing(coin: CoinSnapshot) -> float:
    score = NEUTRAL
    price = coin.price

    profile = coin.volume_profile
    if profile is not None:
        distance = pct_distance(price, profile.poc_price)
        if distance < 2:
            score += 20
        elif distance < 5:
            score += 10

        if profile.value_area_low <= price <= profile.value_area_high:
            score += 15
        elif price < profile.value_area_low:
            score += 10
        else:
            score -= 10

    smart = coin.smart_volume
    if smart is not None:
        if smart.whale_volume_pct > 40 and abs(coin.price_change_24h) < 5:
            score += 15
        if smart.buy_pressure > 60:
            score += 10
        elif smart.buy_pressure < 40:
            score -= 10

    return clamp(score, 0.0, 100.0)


def timing_multiplier(score: float) -> float:
    """Multiplier applied to the composite score."""
    for threshold, multiplier in BOOST_TIERS:
        if score > threshold:
            return multiplier
    for threshold, multiplier in PENALTY_TIERS:
        if score < threshold:
            return multiplier
    return 1.0


def timing_recommendation(score: float):
    for threshold, action, confidence in RECOMMENDATIONS:
        if score > threshold:
            return action, confidence
    return TimingAction.AVOID_NOW, Confidence.HIGH


def _signals(macro: float, coin: float, sector: float, technical: float) -> List[str]:
    signals: List[str] = []

    if macro > 75:
        signals.append("Excellent market conditions for altcoins")
    elif macro < 30:
        signals.append("Weak market conditions - Bitcoin dominates")

    if coin > 70:
        signals.append("Coin is at a good entry moment")
    elif coin < 35:
        signals.append("Coin may be overheated or in a downtrend")

    if sector > 70:
        signals.append("Sector has strong momentum")
    elif sector < 35:
        signals.append("Weak sector - better timing may come later")

    if technical > 70:
        signals.append("Good technical position for entry")
    elif technical < 35:
        signals.append("Weak technical position - wait for a better level")

    return signals


def analyze_timing(
    coin: CoinSnapshot,
    market: Optional[MarketConditions],
    peers: Sequence[CoinSnapshot] = (),
) -> TimingResult:
    """Weighted timing score with recommendation and multiplier."""
    macro = macro_timing(market)
    coin_score = coin_timing(coin)
    sector = sector_timing(coin, peers)
    technical = technical_timing(coin)

    weighted = (
        macro * WEIGHTS["macro"]
        + coin_score * WEIGHTS["coin"]
        + sector * WEIGHTS["sector"]
        + technical * WEIGHTS["technical"]
    )
    score = int(round(weighted))
    action, confidence = timing_recommendation(score)

    return TimingResult(
        score=score,
        macro=int(round(macro)),
        coin=int(round(coin_score)),
        sector=int(round(sector)),
        technical=int(round(technical)),
        action=action,
        confidence=confidence,
        multiplier=timing_multiplier(score),
        signals=_signals(macro, coin_score, sector, technical),
    )
