"""Result models produced by the scoring engine."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from ..core.enums import AccumulationCategory, Category, Confidence, TimingAction

if TYPE_CHECKING:
    from ..decision.action_signal import ActionSignal
    from ..decision.risk_reward import RiskRewardResult


@dataclass
class FactorResult:
    """A bounded factor score with the signals it produced."""

    score: float
    signals: List[str] = field(default_factory=list)


@dataclass
class AccumulationResult:
    """Volatility contraction + volume absorption + whale pressure."""

    score: float
    volatility_score: float
    absorption_score: float
    whale_score: float
    category: AccumulationCategory
    recommendation: str
    signals: List[str] = field(default_factory=list)
    atr_7d: Optional[float] = None
    large_trades: int = 0
    buy_pressure: Optional[float] = None


@dataclass
class TimingResult:
    """Entry timing assessment."""

    score: int
    macro: int
    coin: int
    sector: int
    technical: int
    action: TimingAction
    confidence: Confidence
    multiplier: float
    signals: List[str] = field(default_factory=list)


@dataclass
class ScoreBreakdown:
    """Explainable composite score of one coin."""

    symbol: str
    price_score: float
    volume_score: float
    position_score: float
    risk_score: float
    dev_score: float
    dex_score: float
    structure_score: float
    flow_score: float
    accumulation: AccumulationResult
    timing: TimingResult
    raw_strength: float
    quality_multiplier: float
    sector_multiplier: float
    total_score: float
    category: Category
    signals: List[str] = field(default_factory=list)
    action_signal: Optional["ActionSignal"] = None
    risk_reward: Optional["RiskRewardResult"] = None

    def breakdown(self) -> Dict[str, str]:
        """Human-readable sub-scores against their maxima."""
        return {
            "price_momentum": f"{self.price_score:.1f}/70",
            "volume_activity": f"{self.volume_score:.0f}/100",
            "market_position": f"{self.position_score:.0f}/60",
            "risk_factor": f"{self.risk_score:.0f}/100",
            "developer_activity": f"{self.dev_score:.0f}/100",
            "dex_quality": f"{self.dex_score:.1f}/100",
            "market_structure": f"{self.structure_score:+.0f}",
            "exchange_flow": f"{self.flow_score:.0f}/100",
            "accumulation": f"{self.accumulation.score:.0f}/100",
            "timing": f"{self.timing.score}/100",
        }


@dataclass(frozen=True)
class NotRanked:
    """Sentinel for coins that cannot be ranked."""

    symbol: str
    reason: str = "not listed on reference exchange"
