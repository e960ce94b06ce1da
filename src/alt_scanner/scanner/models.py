"""Models for scan reports."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from ..core.enums import Strategy
from ..core.models import CoinSnapshot, MarketConditions
from ..scoring.models import ScoreBreakdown
from .market_phase import MarketCondition, PhaseInfo


@dataclass
class RankedCoin:
    """A scanned coin with its score."""

    snapshot: CoinSnapshot
    score: ScoreBreakdown

    @property
    def symbol(self) -> str:
        return self.snapshot.symbol

    @property
    def total_score(self) -> float:
        return self.score.total_score

    def __lt__(self, other: "RankedCoin") -> bool:
        return self.total_score < other.total_score


@dataclass
class StrategyPerformance:
    avg_score: float = 0.0
    avg_risk: float = 0.0
    success_rate: float = 0.0
    strong_candidates: int = 0
    top_symbol: Optional[str] = None


@dataclass
class StrategyResult:
    """Ranked output of one strategy."""

    strategy: Strategy
    description: str
    total_candidates: int
    listed_candidates: int
    ranked: List[RankedCoin] = field(default_factory=list)
    performance: StrategyPerformance = field(default_factory=StrategyPerformance)
    is_recommended: bool = False

    @property
    def top_coin(self) -> Optional[RankedCoin]:
        return self.ranked[0] if self.ranked else None


@dataclass
class SectorAggregate:
    name: str
    coin_count: int
    average_score: float
    hot_coins: int
    top_symbol: str
    top_score: float


@dataclass
class MultiStrategyCoin:
    symbol: str
    strategies: List[Strategy]
    best_score: float


@dataclass
class CrossStrategyAnalysis:
    multi_strategy_coins: List[MultiStrategyCoin] = field(default_factory=list)
    overlaps: Dict[str, List[str]] = field(default_factory=dict)
    insights: List[str] = field(default_factory=list)


@dataclass
class ScanStats:
    total_analyzed: int = 0
    unique_candidates: int = 0
    with_dex_data: int = 0
    average_score: float = 0.0
    above_threshold: int = 0
    avg_score_by_strategy: Dict[Strategy, float] = field(default_factory=dict)


@dataclass
class ScanReport:
    """Everything one scan produced."""

    market: MarketConditions
    phase: PhaseInfo
    condition: MarketCondition
    strategies: Dict[Strategy, StrategyResult]
    sectors: List[SectorAggregate]
    cross_strategy: CrossStrategyAnalysis
    stats: ScanStats
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def recommended_strategy(self) -> Strategy:
        return self.condition.recommended_strategy

    def all_ranked(self) -> List[RankedCoin]:
        """Best score per symbol across strategies, best first."""
        best: Dict[str, RankedCoin] = {}
        for result in self.strategies.values():
            for coin in result.ranked:
                current = best.get(coin.symbol)
                if current is None or coin.total_score > current.total_score:
                    best[coin.symbol] = coin
        return sorted(best.values(), key=lambda c: (-c.total_score, c.symbol))
