"""Market phase and recommended strategy from BTC dominance."""

from dataclasses import dataclass
from typing import Tuple

from ..core.enums import MarketPhase, Strategy


@dataclass(frozen=True)
class PhaseInfo:
    phase: MarketPhase
    description: str
    alt_strategy: str
    risk: str
    opportunity: str


# (dominance above, phase), first match wins
PHASES: Tuple[Tuple[float, PhaseInfo], ...] = (
    (70, PhaseInfo(MarketPhase.BITCOIN_WINTER, "Extreme BTC dominance - alts in deep winter",
                   "Accumulate quality alts at a discount", "LOW", "HIGH")),
    (65, PhaseInfo(MarketPhase.BITCOIN_SEASON, "Strong BTC dominance - Bitcoin leading",
                   "Wait for better entries, focus on majors", "MEDIUM", "LOW")),
    (60, PhaseInfo(MarketPhase.BTC_FAVORED, "BTC still dominant but weakening",
                   "Start positioning in strong alts", "MEDIUM", "MEDIUM")),
    (55, PhaseInfo(MarketPhase.TRANSITION, "Market transitioning - watch closely",
                   "Increase alt exposure gradually", "MEDIUM", "HIGH")),
    (50, PhaseInfo(MarketPhase.BALANCED, "Balanced market - both BTC and alts perform",
                   "Diversify between BTC and alts", "LOW", "HIGH")),
    (45, PhaseInfo(MarketPhase.ALT_SEASON, "Alt season in progress",
                   "Ride the wave but set stop losses", "HIGH", "EXTREME")),
)

PEAK_EUPHORIA = PhaseInfo(MarketPhase.PEAK_EUPHORIA, "Extreme alt dominance - be careful",
                          "Take profits, market might be topping", "EXTREME", "LOW")


@dataclass(frozen=True)
class MarketCondition:
    """Which strategy fits the current dominance regime."""

    label: str
    advice: str
    recommended_strategy: Strategy


def get_market_phase(btc_dominance: float) -> PhaseInfo:
    for threshold, info in PHASES:
        if btc_dominance > threshold:
            return info
    return PEAK_EUPHORIA


def get_market_condition(btc_dominance: float) -> MarketCondition:
    if btc_dominance > 65:
        return MarketCondition("BITCOIN SEASON", "Hard time for alts - prefer the VALUE strategy", Strategy.VALUE)
    if btc_dominance > 55:
        return MarketCondition("TRANSITION", "Mixed market - a BALANCED approach works best", Strategy.BALANCED)
    return MarketCondition("ALT FRIENDLY", "Great time for MOMENTUM plays", Strategy.MOMENTUM)
