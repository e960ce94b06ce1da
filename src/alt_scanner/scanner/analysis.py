"""Aggregates over ranked scan results."""

from collections import OrderedDict
from itertools import combinations
from typing import Dict, List, Sequence

from ..core.enums import Strategy
from .models import (
    CrossStrategyAnalysis,
    MultiStrategyCoin,
    RankedCoin,
    SectorAggregate,
    StrategyPerformance,
    StrategyResult,
)
from .sectors import UNKNOWN_SECTOR

HOT_COIN_SCORE = 60.0
SUCCESS_SCORE = 50.0
STRONG_SCORE = 60.0


def analyze_sectors(ranked: Sequence[RankedCoin]) -> List[SectorAggregate]:
    """Per-sector average score, size, hot-coin count and leader, best sector first."""
    groups: Dict[str, List[RankedCoin]] = OrderedDict()
    for coin in ranked:
        sector = coin.snapshot.sector
        if sector == UNKNOWN_SECTOR:
            continue
        groups.setdefault(sector, []).append(coin)

    aggregates = []
    for name, coins in groups.items():
        scores = [c.total_score for c in coins]
        top = max(coins, key=lambda c: c.total_score)
        aggregates.append(SectorAggregate(
            name=name,
            coin_count=len(coins),
            average_score=sum(scores) / len(scores),
            hot_coins=sum(1 for s in scores if s >= HOT_COIN_SCORE),
            top_symbol=top.symbol,
            top_score=top.total_score,
        ))

    aggregates.sort(key=lambda a: (-a.average_score, a.name))
    return aggregates


def strategy_performance(ranked: Sequence[RankedCoin]) -> StrategyPerformance:
    if not ranked:
        return StrategyPerformance()

    scores = [c.total_score for c in ranked]
    risks = [c.score.risk_score for c in ranked]
    return StrategyPerformance(
        avg_score=sum(scores) / len(scores),
        avg_risk=sum(risks) / len(risks),
        success_rate=sum(1 for s in scores if s >= SUCCESS_SCORE) / len(scores) * 100,
        strong_candidates=sum(1 for s in scores if s >= STRONG_SCORE),
        top_symbol=ranked[0].symbol,
    )


def average_score(ranked: Sequence[RankedCoin]) -> float:
    """Mean of the positive total scores, 0 when there are none."""
    scores = [c.total_score for c in ranked if c.total_score > 0]
    return sum(scores) / len(scores) if scores else 0.0


def count_above(ranked: Sequence[RankedCoin], threshold: float) -> int:
    return sum(1 for c in ranked if c.total_score >= threshold)


def analyze_cross_strategies(results: Dict[Strategy, StrategyResult], limit: int = 10) -> CrossStrategyAnalysis:
    """Coins picked by several strategies and pairwise strategy overlaps."""
    occurrences: Dict[str, MultiStrategyCoin] = OrderedDict()
    for strategy, result in results.items():
        for coin in result.ranked:
            entry = occurrences.setdefault(coin.symbol, MultiStrategyCoin(coin.symbol, [], 0.0))
            entry.strategies.append(strategy)
            entry.best_score = max(entry.best_score, coin.total_score)

    multi = [e for e in occurrences.values() if len(e.strategies) > 1]
    multi.sort(key=lambda e: (-e.best_score, e.symbol))
    multi = multi[:limit]

    overlaps: Dict[str, List[str]] = {}
    for first, second in combinations(results.keys(), 2):
        second_symbols = {c.symbol for c in results[second].ranked}
        shared = [c.symbol for c in results[first].ranked if c.symbol in second_symbols]
        overlaps[f"{first.value}+{second.value}"] = shared

    return CrossStrategyAnalysis(
        multi_strategy_coins=multi,
        overlaps=overlaps,
        insights=_cross_strategy_insights(multi, overlaps),
    )


def _cross_strategy_insights(multi: List[MultiStrategyCoin], overlaps: Dict[str, List[str]]) -> List[str]:
    insights: List[str] = []

    if multi:
        insights.append(f"{len(multi)} coins fit several strategies - the strongest signals")
        top = multi[0]
        names = ", ".join(s.value for s in top.strategies)
        insights.append(f"Best multi-strategy coin: {top.symbol} ({names})")
    else:
        insights.append("Every strategy finds unique opportunities - a diversified market")

    if overlaps:
        pair, shared = max(overlaps.items(), key=lambda item: len(item[1]))
        if shared:
            insights.append(f"Largest strategy overlap: {pair} ({len(shared)} coins)")

    return insights
