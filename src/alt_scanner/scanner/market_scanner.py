"""Market scanner running every strategy over one set of snapshots."""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from ..core.enums import Strategy
from ..core.models import CoinSnapshot, MarketConditions
from ..decision.action_signal import ActionSignalEngine
from ..decision.risk_reward import RiskRewardEstimator
from ..scoring.config import RankerConfig, get_profile
from ..scoring.ranker import CompositeRanker
from .analysis import (
    analyze_cross_strategies,
    analyze_sectors,
    average_score,
    count_above,
    strategy_performance,
)
from .filters import filter_candidates, unique_symbols
from .market_phase import get_market_condition, get_market_phase
from .models import RankedCoin, ScanReport, ScanStats, StrategyResult
from .sectors import UNKNOWN_SECTOR, SectorCatalog

if TYPE_CHECKING:
    from ..data.collector import SnapshotCollector

logger = logging.getLogger(__name__)


class MarketScanner:
    """
    Pre-filters coins per strategy, ranks the survivors, attaches action and
    risk-reward advice to every score and aggregates the results.
    """

    def __init__(self, config: Optional[Dict] = None):
        defaults = self._default_config()
        if config:
            defaults.update(config)
        self.config = defaults

        self.sectors = SectorCatalog(self.config["sector_overrides"])
        self.ranker = CompositeRanker(self.config["ranker"])
        self.action_engine = ActionSignalEngine()
        self.risk_reward = RiskRewardEstimator(self.config["timeframe"])
        self._last_report: Optional[ScanReport] = None
        logger.info(f"Market scanner initialized with {len(self.config['strategies'])} strategies")

    @staticmethod
    def _default_config() -> Dict:
        return {
            "strategies": list(Strategy),
            "candidate_limit": 40,
            "top_n": 12,
            "score_threshold": 60.0,
            "sector_overrides": {},
            "ranker": RankerConfig(),
            "timeframe": "30d",
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def scan(
        self,
        coins: Sequence[CoinSnapshot],
        market: MarketConditions,
        total_analyzed: Optional[int] = None,
    ) -> ScanReport:
        """
        Run every configured strategy over *coins*.

        Duplicate tickers keep only the best-ranked coin, and coins with an
        unknown sector are resolved through the sector catalog first.
        *total_analyzed* overrides the reported universe size when the
        caller has already narrowed the input.
        """
        coins = [self._with_sector(c) for c in unique_symbols(coins)]
        condition = get_market_condition(market.btc_dominance)
        phase = get_market_phase(market.btc_dominance)

        results: Dict[Strategy, StrategyResult] = {}
        for strategy in self.config["strategies"]:
            results[strategy] = self._run_strategy(strategy, coins, market, condition.recommended_strategy)

        report = ScanReport(
            market=market,
            phase=phase,
            condition=condition,
            strategies=results,
            sectors=[],
            cross_strategy=analyze_cross_strategies(results),
            stats=ScanStats(),
        )
        unique = report.all_ranked()
        report.sectors = analyze_sectors(unique)
        report.stats = ScanStats(
            total_analyzed=total_analyzed if total_analyzed is not None else len(coins),
            unique_candidates=len(unique),
            with_dex_data=sum(
                1 for c in unique
                if c.snapshot.dex_metrics is not None and c.snapshot.dex_metrics.has_dex_data
            ),
            average_score=average_score(unique),
            above_threshold=count_above(unique, self.config["score_threshold"]),
            avg_score_by_strategy={s: r.performance.avg_score for s, r in results.items()},
        )

        self._last_report = report
        logger.info(
            f"Scan complete: {report.stats.unique_candidates} candidates, "
            f"{report.stats.above_threshold} above {self.config['score_threshold']:.0f}, "
            f"phase {phase.phase.value}, recommended {condition.recommended_strategy.value}"
        )
        return report

    async def scan_market(self, collector: "SnapshotCollector") -> ScanReport:
        """
        Full scan from live data.

        Only coins passing at least one strategy pre-filter are enriched,
        which keeps the number of per-coin requests bounded.
        """
        market = await collector.collect_market_conditions()
        snapshots = await collector.collect_snapshots()

        wanted = set()
        for strategy in self.config["strategies"]:
            criteria = get_profile(strategy).criteria
            wanted.update(c.symbol for c in filter_candidates(snapshots, criteria, self.config["candidate_limit"]))

        candidates = [c for c in snapshots if c.symbol in wanted]
        logger.info(f"Enriching {len(candidates)} of {len(snapshots)} coins")
        enriched = await collector.enrich(candidates)
        return self.scan(enriched, market, total_analyzed=len(snapshots))

    def get_top_candidates(self, n: Optional[int] = None, strategy: Optional[Strategy] = None) -> List[RankedCoin]:
        """Top *n* coins of the last scan, for one strategy or across all of them."""
        if self._last_report is None:
            return []
        n = n or self.config["top_n"]
        if strategy is None:
            return self._last_report.all_ranked()[:n]
        result = self._last_report.strategies.get(strategy)
        return result.ranked[:n] if result else []

    @property
    def last_report(self) -> Optional[ScanReport]:
        return self._last_report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _with_sector(self, coin: CoinSnapshot) -> CoinSnapshot:
        if coin.sector != UNKNOWN_SECTOR:
            return coin
        sector = self.sectors.get_sector(coin.symbol)
        if sector == UNKNOWN_SECTOR:
            return coin
        return coin.model_copy(update={"sector": sector})

    def _run_strategy(
        self,
        strategy: Strategy,
        coins: Sequence[CoinSnapshot],
        market: MarketConditions,
        recommended: Strategy,
    ) -> StrategyResult:
        profile = get_profile(strategy)
        candidates = filter_candidates(coins, profile.criteria, self.config["candidate_limit"])
        by_symbol = {c.symbol: c for c in candidates}

        ranked: List[RankedCoin] = []
        for score in self.ranker.rank(candidates, market, weights=profile.weights):
            snapshot = by_symbol[score.symbol]
            score.action_signal = self.action_engine.generate(snapshot, score, market)
            score.risk_reward = self.risk_reward.estimate(snapshot, score, market)
            ranked.append(RankedCoin(snapshot=snapshot, score=score))

        logger.info(
            f"{strategy.value}: {len(candidates)} candidates, {len(ranked)} ranked"
            + (f", top {ranked[0].symbol} ({ranked[0].total_score:.1f})" if ranked else "")
        )
        return StrategyResult(
            strategy=strategy,
            description=profile.description,
            total_candidates=len(candidates),
            listed_candidates=len(ranked),
            ranked=ranked,
            performance=strategy_performance(ranked),
            is_recommended=strategy == recommended,
        )
