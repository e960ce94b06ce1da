"""Exchange net-flow scoring. Outflows from exchanges read bullish."""

from typing import List, Optional

from ..core.models import CoinSnapshot
from .metrics import tier_score, tier_score_below
from .models import FactorResult

NEUTRAL_FLOW_SCORE = 50.0

OUTFLOW_TIERS = ((-0.5, 95), (-0.25, 85), (-0.1, 75), (0, 60))
INFLOW_TIERS = ((0.5, 5), (0.25, 15), (0.1, 25), (0, 40))


def netflow_ratio(coin: CoinSnapshot) -> Optional[float]:
    """24h net flow as % of market cap, None when it cannot be computed."""
    if coin.exchange_flow is None or not coin.market_cap:
        return None
    return coin.exchange_flow.netflow_24h_usd / coin.market_cap * 100


def flow_score(coin: CoinSnapshot) -> float:
    ratio = netflow_ratio(coin)
    if ratio is None:
        return NEUTRAL_FLOW_SCORE
    if ratio < 0:
        return tier_score_below(ratio, OUTFLOW_TIERS)
    if ratio > 0:
        return tier_score(ratio, INFLOW_TIERS)
    return NEUTRAL_FLOW_SCORE


def flow_signals(coin: CoinSnapshot, score: float) -> List[str]:
    if coin.exchange_flow is None:
        return []
    if score >= 80:
        return ["Large exchange outflow - strong accumulation"]
    if score >= 60:
        return ["Exchange outflows - tokens moving to cold wallets"]
    if score <= 20:
        return ["Significant exchange inflows - possible selling pressure"]
    if score <= 40:
        return ["Exchange inflows - watch for distribution"]
    return []


def score_flow(coin: CoinSnapshot) -> FactorResult:
    score = flow_score(coin)
    return FactorResult(score=score, signals=flow_signals(coin, score))
