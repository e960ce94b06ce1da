"""Numeric primitives shared by the factor scorers."""

from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

ROUND_NUMBER_LEVELS = (0.1, 0.25, 0.5, 0.75, 1.0, 1.5, 2.0, 2.5, 3.0)

Tiers = Sequence[Tuple[float, float]]


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def tier_score(value: float, tiers: Tiers, default: float = 0.0) -> float:
    """Return points of the first (threshold, points) tier with value > threshold.

    Tiers are checked in order, so list them from the highest threshold down.
    """
    for threshold, points in tiers:
        if value > threshold:
            return points
    return default


def tier_score_below(value: float, tiers: Tiers, default: float = 0.0) -> float:
    """Return points of the first (threshold, points) tier with value < threshold."""
    for threshold, points in tiers:
        if value < threshold:
            return points
    return default


def smoothed_score(value: float, max_expected_value: float, max_points: float) -> float:
    """Linear score that saturates at max_points once value reaches max_expected_value."""
    if max_expected_value <= 0:
        return 0.0
    value = max(value, 0.0)
    return min(value / max_expected_value, 1.0) * max_points


def average_true_range(klines: Optional[pd.DataFrame]) -> float:
    """Mean true range over all adjacent candle pairs."""
    if klines is None or len(klines) < 2:
        return 0.0

    high = klines["high"].astype(float)
    low = klines["low"].astype(float)
    prev_close = klines["close"].astype(float).shift(1)

    true_range = pd.concat(
        [high - low, (high - prev_close).abs(), (low - prev_close).abs()],
        axis=1,
    ).max(axis=1)

    return float(true_range.iloc[1:].mean())


def simple_moving_average(klines: Optional[pd.DataFrame], period: int) -> Optional[float]:
    """Mean close over the last period candles, None without enough history."""
    if klines is None or period <= 0 or len(klines) < period:
        return None
    return float(klines["close"].astype(float).iloc[-period:].mean())


def trend_stability_bonus(klines: Optional[pd.DataFrame]) -> float:
    """Bonus for a steady trend: lower stdev of daily % closes over 7 candles scores higher."""
    if klines is None or len(klines) < 7:
        return 0.0

    closes = klines["close"].astype(float).iloc[-7:]
    daily_changes = closes.pct_change().dropna() * 100
    if daily_changes.empty:
        return 0.0

    stdev = float(np.std(daily_changes.to_numpy()))
    if not np.isfinite(stdev):
        return 0.0
    return tier_score_below(stdev, ((5, 15), (10, 10), (15, 5)))


def nearest_round_number(price: float, threshold: float = 0.15) -> Optional[float]:
    """Psychological price level just above price, within threshold (fraction)."""
    for level in ROUND_NUMBER_LEVELS:
        distance = abs(price - level) / level
        if distance <= threshold and price < level:
            return level
    return None


def pct_distance(price: float, reference: float) -> float:
    """Absolute distance of price from reference in percent; inf when reference is not positive."""
    if reference <= 0:
        return float("inf")
    return abs(price - reference) / reference * 100
