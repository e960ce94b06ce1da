"""Decentralized-exchange liquidity quality scoring."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.enums import RiskLevel
from ..core.models import DexMetrics
from .metrics import clamp, tier_score
from .models import FactorResult

NO_DEX_DATA_SIGNAL = "No DEX data - centralized exchange trading only"

BUY_PRESSURE_TIERS = ((60, 20), (55, 15), (45, 10), (40, 5))
TXN_TIERS = ((10_000, 10), (5_000, 8), (1_000, 6), (100, 3))
DEX_COUNT_TIERS = ((5, 15), (3, 12), (2, 8), (1, 5))


@dataclass
class DexAnalysis:
    """Qualitative read of DEX conditions."""

    risk_level: RiskLevel
    recommendation: str
    insights: List[str] = field(default_factory=list)
    scores: Dict[str, float] = field(default_factory=dict)


def _has_data(dex: Optional[DexMetrics]) -> bool:
    return dex is not None and dex.has_dex_data


def _dex_count_points(count: int) -> float:
    for minimum, points in DEX_COUNT_TIERS:
        if count >= minimum:
            return points
    return 0.0


def dex_score(dex: Optional[DexMetrics]) -> float:
    """DEX quality, 0-100; 0 without data."""
    if not _has_data(dex):
        return 0.0

    score = dex.liquidity_score * 0.3
    score += dex.volume_quality_score * 0.25
    score += tier_score(dex.buy_pressure, BUY_PRESSURE_TIERS)
    score += _dex_count_points(dex.unique_dexes)
    score += tier_score(dex.total_txns_24h, TXN_TIERS)
    return clamp(score, 0.0, 100.0)


def dex_signals(dex: Optional[DexMetrics]) -> List[str]:
    if not _has_data(dex):
        return [NO_DEX_DATA_SIGNAL]

    signals: List[str] = []

    if dex.liquidity_score >= 80:
        signals.append("Excellent DEX liquidity (>$1M)")
    elif dex.liquidity_score >= 60:
        signals.append("Good DEX liquidity")
    elif dex.liquidity_score < 40:
        signals.append("Low DEX liquidity - watch slippage")

    if dex.buy_pressure > 65:
        signals.append("Strong DEX buy pressure")
    elif dex.buy_pressure < 35:
        signals.append("DEX sell pressure")

    if dex.volume_quality_score >= 80:
        signals.append("Organic DEX volume")
    elif dex.volume_quality_score < 40:
        signals.append("Suspicious DEX volume - possible wash trading")

    if dex.unique_dexes >= 5:
        signals.append("Wide DEX availability")
    elif dex.unique_dexes == 1:
        signals.append("Available on a single DEX only")

    if dex.total_txns_24h > 10_000:
        signals.append("Very active DEX trading")

    if dex.liquidity_score >= 70 and dex.buy_pressure > 60 and dex.volume_quality_score >= 60:
        signals.append("DEX alpha - every indicator positive")

    return signals


def score_dex(dex: Optional[DexMetrics]) -> FactorResult:
    return FactorResult(score=dex_score(dex), signals=dex_signals(dex))


def enhanced_dex_analysis(dex: Optional[DexMetrics]) -> DexAnalysis:
    """Risk level, recommendation and insights from DEX metrics."""
    if not _has_data(dex):
        return DexAnalysis(
            risk_level=RiskLevel.HIGH,
            recommendation="No DEX presence - fully dependent on centralized exchanges",
        )

    insights: List[str] = []
    risk_level = RiskLevel.MEDIUM
    recommendation = "Standard DEX trading"

    if dex.liquidity_score < 40:
        risk_level = RiskLevel.HIGH
        insights.append("Low liquidity means high slippage")
    if dex.volume_quality_score < 40:
        risk_level = RiskLevel.HIGH
        insights.append("Suspicious volume - verify before entering")
    if dex.unique_dexes == 1:
        insights.append("Concentration risk - single DEX")

    if dex.liquidity_score >= 80 and dex.buy_pressure > 60:
        risk_level = RiskLevel.LOW
        recommendation = "Excellent DEX conditions - good opportunity"
        insights.append("Ideal conditions: deep liquidity with buy pressure")

    if dex.total_liquidity > 0 and dex.total_volume_24h / dex.total_liquidity > 10:
        insights.append("High turnover versus liquidity - potential market-making opportunity")

    return DexAnalysis(
        risk_level=risk_level,
        recommendation=recommendation,
        insights=insights,
        scores={
            "liquidity": dex.liquidity_score,
            "volume_quality": dex.volume_quality_score,
            "diversity": min(dex.unique_dexes / 5 * 100, 100.0),
        },
    )
