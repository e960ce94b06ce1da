"""Independent factor scorers.

Every scorer maps one facet of a CoinSnapshot to a bounded number and never
raises on missing optional data: absent datasets fall back to the documented
neutral or zero value.
"""

import logging
from typing import Dict, List, Optional

from ..core.models import CoinSnapshot, MarketConditions
from .metrics import (
    average_true_range,
    clamp,
    nearest_round_number,
    simple_moving_average,
    smoothed_score,
    tier_score,
    trend_stability_bonus,
)

logger = logging.getLogger(__name__)

PRICE_SCORE_MAX = 70.0
VOLUME_SCORE_MAX = 100.0
POSITION_SCORE_MAX = 60.0
RISK_SCORE_MAX = 100.0
DEV_SCORE_MAX = 100.0
STRUCTURE_SCORE_MIN = -20.0
STRUCTURE_SCORE_MAX = 30.0
STRUCTURE_MIN_CANDLES = 30

VOLUME_MCAP_TIERS = ((50, 50), (30, 40), (20, 30), (10, 20), (5, 10))
TRADE_COUNT_TIERS = ((2_000_000, 30), (1_000_000, 25), (500_000, 20), (100_000, 10), (50_000, 5))
PRICE_RANGE_TIERS = ((20, 20), (15, 15), (10, 10), (5, 5))

RANK_TIERS = ((20, 10), (50, 30), (75, 20), (100, 10))
PRICE_TIERS = ((0.01, 30), (0.1, 25), (0.5, 20), (1, 15), (2, 10), (3, 5))

ATR_RISK_TIERS = ((15, 30), (10, 20), (6, 10), (3, 5))
SMA_EXTENSION_TIERS = ((40, 25), (25, 15))

COMMIT_TIERS = ((100, 60), (50, 45), (20, 30), (5, 15), (0, 5))
CONTRIBUTOR_TIERS = ((50, 20), (20, 15), (10, 10), (3, 5))
STAR_TIERS = ((10_000, 20), (5_000, 15), (1_000, 10), (100, 5))


def price_momentum_score(coin: CoinSnapshot) -> float:
    """Price momentum, 0-70."""
    change_7d = coin.price_change_7d
    change_24h = coin.price_change_24h

    score = smoothed_score(change_7d, 70, 40)
    score += smoothed_score(change_24h, 25, 20)

    if change_24h > 0 and change_7d > 0:
        score += min(change_24h / 15, 1.0) * 10

    # Pullback inside an established weekly rally
    if change_7d > 20 and -10 < change_24h < 0:
        score += 15

    if change_7d > 10:
        score += trend_stability_bonus(coin.klines)

    return clamp(score, 0.0, PRICE_SCORE_MAX)


def volume_activity_score(coin: CoinSnapshot) -> float:
    """Volume activity, 0-100."""
    score = tier_score(coin.volume_to_mcap * 100, VOLUME_MCAP_TIERS)

    listing = coin.binance_listing
    if listing is not None:
        score += tier_score(listing.trades_24h, TRADE_COUNT_TIERS)
        score += tier_score(listing.price_range_24h, PRICE_RANGE_TIERS)

    return clamp(score, 0.0, VOLUME_SCORE_MAX)


def _price_tier(price: float) -> float:
    for ceiling, points in PRICE_TIERS:
        if price < ceiling:
            return points
    return 0.0


def _rank_tier(rank: int) -> float:
    # Top-20 deliberately scores below top-50
    for ceiling, points in RANK_TIERS:
        if rank <= ceiling:
            return points
    return 0.0


def market_position_score(coin: CoinSnapshot) -> float:
    """Market position and retail psychology, 0-60."""
    score = _rank_tier(coin.rank) + _price_tier(coin.price)

    level = nearest_round_number(coin.price)
    if level is not None:
        distance = abs(coin.price - level) / level
        if distance < 0.05:
            score += 20
        elif distance < 0.10:
            score += 10

    return clamp(score, 0.0, POSITION_SCORE_MAX)


def risk_score(coin: CoinSnapshot, market: Optional[MarketConditions] = None) -> float:
    """Risk, 0-100 where higher means riskier."""
    risk = 0.0

    atr = average_true_range(_last(coin, 14))
    if atr > 0:
        risk += tier_score(atr / coin.price * 100, ATR_RISK_TIERS)

    if coin.price_change_7d > 50:
        risk += min((coin.price_change_7d - 50) * 0.3, 30)

    if market is not None and market.fear_greed is not None:
        risk += tier_score(market.fear_greed.value, ((80, 25), (65, 15)))

    dev = coin.developer_activity
    if dev is not None and dev.commits_4w == 0:
        risk += 20

    if coin.volume_to_mcap < 0.02:
        risk += 15

    if coin.rank > 75:
        risk += min((coin.rank - 75) * 0.6, 15)

    sma14 = simple_moving_average(coin.klines, 14)
    if sma14:
        extension = (coin.price - sma14) / sma14 * 100
        risk += tier_score(extension, SMA_EXTENSION_TIERS)

    return clamp(float(round(risk)), 0.0, RISK_SCORE_MAX)


def developer_activity_score(coin: CoinSnapshot) -> float:
    """Developer activity, 0-100; 0 without data."""
    dev = coin.developer_activity
    if dev is None:
        return 0.0

    score = tier_score(dev.commits_4w, COMMIT_TIERS)
    score += tier_score(dev.contributors, CONTRIBUTOR_TIERS)
    score += tier_score(dev.stars, STAR_TIERS)
    return clamp(score, 0.0, DEV_SCORE_MAX)


def market_structure_score(coin: CoinSnapshot) -> float:
    """Higher-highs/higher-lows structure over the last 14 candles, -20..+30."""
    if coin.candle_count < STRUCTURE_MIN_CANDLES:
        return 0.0

    window = coin.klines.iloc[-14:]
    high_14 = float(window["high"].max())
    low_14 = float(window["low"].min())
    last_close = float(window["close"].iloc[-1])

    score = 0.0
    if high_14 > 0 and last_close >= high_14 * 0.95:
        score += 15

    first_half_low = float(window["low"].iloc[:7].min())
    second_half_low = float(window["low"].iloc[7:].min())
    if second_half_low > first_half_low:
        score += 15

    if low_14 > 0 and last_close <= low_14 * 1.02:
        score -= 20

    return clamp(score, STRUCTURE_SCORE_MIN, STRUCTURE_SCORE_MAX)


def base_signals(coin: CoinSnapshot, scores: Dict[str, float]) -> List[str]:
    """Readable signals for the price, volume, position and risk factors."""
    signals: List[str] = []

    if coin.price_change_7d > 50:
        signals.append("Extended rally - consider waiting for a pullback")
    elif coin.price_change_7d > 30 and coin.price_change_24h > 5:
        signals.append("Strong momentum continuation")
    elif coin.price_change_7d > 10 and coin.price_change_24h < -5:
        signals.append("Potential buy-the-dip opportunity")

    volume = scores.get("volume", 0.0)
    if volume > 70:
        signals.append("Extreme volume - something is happening")
    elif volume > 50:
        signals.append("Strong trader interest")

    level = nearest_round_number(coin.price)
    if level is not None:
        signals.append(f"Approaching psychological level: ${level:g}")

    if coin.price < 0.01:
        signals.append("Penny coin - high risk, high reward")

    risk = scores.get("risk", 50.0)
    if risk > 60:
        signals.append("High risk - trade carefully")
    elif risk < 30:
        signals.append("Relatively low risk profile")

    listing = coin.binance_listing
    if listing is not None and listing.trades_24h > 1_000_000:
        signals.append("Deep liquidity on the reference exchange")

    return signals


def _last(coin: CoinSnapshot, n: int):
    if coin.klines is None:
        return None
    return coin.klines.iloc[-n:]
