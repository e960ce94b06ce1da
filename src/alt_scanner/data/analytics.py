"""Datasets derived from raw trades, candles and DEX pairs."""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..core.enums import TrendDirection, VolumeCharacter
from ..core.models import DexMetrics, SmartVolume, VolumeProfile, WhaleActivity

logger = logging.getLogger(__name__)

LARGE_TRADE_USD = 50_000

# (bucket, lower bound in USD), upper bound is the next bucket's lower bound
TRADE_SIZE_BUCKETS = (
    ("micro", 0),
    ("retail", 100),
    ("medium", 10_000),
    ("large", 50_000),
    ("whale", 100_000),
)

PROFILE_BUCKETS = 20
VALUE_AREA_SHARE = 0.7

LIQUIDITY_TIERS = (
    (10_000_000, 100),
    (5_000_000, 90),
    (1_000_000, 80),
    (500_000, 70),
    (100_000, 60),
    (50_000, 40),
    (10_000, 20),
)
MIN_PAIR_VOLUME = 1_000
MIN_PAIR_LIQUIDITY = 5_000


def _trade_value(trade: Dict) -> float:
    cost = trade.get("cost")
    if cost is not None:
        return float(cost)
    return float(trade["price"]) * float(trade["amount"])


# ------------------------------------------------------------------
# Trades
# ------------------------------------------------------------------

def whale_activity(trades: Sequence[Dict], threshold: float = LARGE_TRADE_USD) -> Optional[WhaleActivity]:
    """Large-trade counts and buy pressure; None without trades."""
    if not trades:
        return None

    large_buys = large_sells = 0
    large_volume = 0.0
    for trade in trades:
        value = _trade_value(trade)
        if value < threshold:
            continue
        large_volume += value
        if trade.get("side") == "buy":
            large_buys += 1
        else:
            large_sells += 1

    total = large_buys + large_sells
    return WhaleActivity(
        large_buys=large_buys,
        large_sells=large_sells,
        buy_pressure=large_buys / total if total else 0.5,
        avg_large_trade_size=large_volume / total if total else 0.0,
    )


def _bucket_for(value: float) -> str:
    name = TRADE_SIZE_BUCKETS[0][0]
    for bucket, lower in TRADE_SIZE_BUCKETS:
        if value >= lower:
            name = bucket
    return name


def smart_volume(trades: Sequence[Dict]) -> Optional[SmartVolume]:
    """Volume split by trade size with the dominant market character."""
    if not trades:
        return None

    volumes = {bucket: 0.0 for bucket, _ in TRADE_SIZE_BUCKETS}
    buy_volume = total = 0.0
    for trade in trades:
        value = _trade_value(trade)
        volumes[_bucket_for(value)] += value
        total += value
        if trade.get("side") == "buy":
            buy_volume += value

    if total <= 0:
        return None

    shares = {bucket: round(v / total * 100, 2) for bucket, v in volumes.items()}
    whale_pct = shares["whale"]
    retail_pct = shares["micro"] + shares["retail"]

    if whale_pct > 40:
        character = VolumeCharacter.WHALE_DOMINATED
    elif whale_pct > 25:
        character = VolumeCharacter.MIXED
    elif retail_pct > 60:
        character = VolumeCharacter.RETAIL_DOMINATED
    else:
        character = VolumeCharacter.BALANCED

    return SmartVolume(
        buckets=shares,
        whale_volume_pct=whale_pct,
        retail_volume_pct=min(retail_pct, 100.0),
        buy_pressure=round(buy_volume / total * 100, 1),
        character=character,
    )


# ------------------------------------------------------------------
# Candles
# ------------------------------------------------------------------

def volume_profile(klines: Optional[pd.DataFrame], buckets: int = PROFILE_BUCKETS) -> Optional[VolumeProfile]:
    """Point of control and 70% value area over *buckets* price levels."""
    if klines is None or klines.empty:
        return None

    low = float(klines["low"].min())
    high = float(klines["high"].max())
    if low <= 0 or high <= low:
        return None

    bucket_size = (high - low) / buckets
    prices = klines[["open", "high", "low", "close"]].astype(float).to_numpy()
    typical = prices.mean(axis=1)
    quote_volume = klines["volume"].astype(float).to_numpy() * typical

    # a typical price on the range high lands in the top bucket
    index = np.clip(np.floor((typical - low) / bucket_size).astype(int), 0, buckets - 1)
    volumes = np.bincount(index, weights=quote_volume, minlength=buckets)

    total = float(volumes.sum())
    if total <= 0:
        return None

    poc = int(np.argmax(volumes))

    value_area: List[int] = []
    covered = 0.0
    for i in np.argsort(-volumes, kind="stable"):
        value_area.append(int(i))
        covered += float(volumes[i])
        if covered >= total * VALUE_AREA_SHARE:
            break

    return VolumeProfile(
        poc_price=low + (poc + 0.5) * bucket_size,
        value_area_low=low + min(value_area) * bucket_size,
        value_area_high=low + (max(value_area) + 1) * bucket_size,
    )


def eth_btc_trend(prices: Sequence[float]) -> Optional[TrendDirection]:
    """ETH/BTC direction from 7d and 30d change of a daily series; None with under 31 points."""
    if len(prices) < 31:
        return None

    now, day7, day30 = prices[-1], prices[-8], prices[-31]
    if day7 <= 0 or day30 <= 0:
        return None
    change_7d = (now - day7) / day7 * 100
    change_30d = (now - day30) / day30 * 100

    if change_7d > 5 and change_30d > 10:
        return TrendDirection.STRONG_UP
    if change_7d > 2 and change_30d > 5:
        return TrendDirection.UP
    if change_7d < -5 and change_30d < -10:
        return TrendDirection.STRONG_DOWN
    if change_7d < -2 and change_30d < -5:
        return TrendDirection.DOWN
    return TrendDirection.SIDEWAYS


# ------------------------------------------------------------------
# DEX pairs
# ------------------------------------------------------------------

def liquidity_score(liquidity_usd: float) -> float:
    for minimum, points in LIQUIDITY_TIERS:
        if liquidity_usd >= minimum:
            return points
    return 10


def _pair_txns(pair: Dict) -> Dict[str, int]:
    h24 = (pair.get("txns") or {}).get("h24") or {}
    return {"buys": int(h24.get("buys") or 0), "sells": int(h24.get("sells") or 0)}


def _pair_volume(pair: Dict) -> float:
    return float((pair.get("volume") or {}).get("h24") or 0)


def _pair_liquidity(pair: Dict) -> float:
    return float((pair.get("liquidity") or {}).get("usd") or 0)


def volume_quality(pairs: Sequence[Dict]) -> float:
    """Organic-volume heuristics summed over pairs, capped at 100."""
    score = 0.0
    for pair in pairs:
        volume = _pair_volume(pair)
        liquidity = _pair_liquidity(pair)
        txns = sum(_pair_txns(pair).values())

        ratio = volume / liquidity if liquidity > 0 else 0
        if 0.5 < ratio < 20:
            score += 20

        avg_txn = volume / txns if txns > 0 else 0
        if 50 < avg_txn < 50_000:
            score += 15

        change = abs(float((pair.get("priceChange") or {}).get("h24") or 0))
        if change < 50:
            score += 10

    return min(score, 100.0)


def dex_metrics(pairs: Sequence[Dict], symbol: Optional[str] = None) -> DexMetrics:
    """Aggregate active DEX pairs; the no-data sentinel when none qualify."""
    if symbol:
        pairs = [
            p for p in pairs
            if ((p.get("baseToken") or {}).get("symbol") or "").upper() == symbol.upper()
        ]

    active = [
        p for p in pairs
        if _pair_volume(p) > MIN_PAIR_VOLUME and _pair_liquidity(p) > MIN_PAIR_LIQUIDITY
    ]
    if not active:
        logger.debug(f"No active DEX pairs for {symbol or 'token'}")
        return DexMetrics.no_data()

    buys = sum(_pair_txns(p)["buys"] for p in active)
    sells = sum(_pair_txns(p)["sells"] for p in active)
    txns = buys + sells
    total_liquidity = sum(_pair_liquidity(p) for p in active)

    return DexMetrics(
        has_dex_data=True,
        liquidity_score=liquidity_score(total_liquidity),
        volume_quality_score=volume_quality(active),
        buy_pressure=round(buys / txns * 100, 1) if txns else 50.0,
        unique_dexes=len({p.get("dexId") for p in active}),
        total_txns_24h=txns,
        total_volume_24h=sum(_pair_volume(p) for p in active),
        total_liquidity=total_liquidity,
    )
