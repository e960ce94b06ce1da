"""Composite ranker combining every factor into one explainable score."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from ..core.enums import Category, VolumeCharacter
from ..core.models import CoinSnapshot, MarketConditions
from .accumulation import analyze_accumulation
from .config import FactorWeights, RankerConfig
from .dex import score_dex
from .factors import (
    base_signals,
    developer_activity_score,
    market_position_score,
    market_structure_score,
    price_momentum_score,
    risk_score,
    volume_activity_score,
)
from .flow import score_flow
from .metrics import clamp, pct_distance
from .models import AccumulationResult, FactorResult, NotRanked, ScoreBreakdown, TimingResult
from .timing import analyze_timing

logger = logging.getLogger(__name__)

UNKNOWN_SECTOR = "Unknown"


@dataclass
class _PreSectorScore:
    """Everything computed before the cross-coin sector step."""

    coin: CoinSnapshot
    price: float
    volume: float
    position: float
    risk: float
    dev: float
    structure: float
    dex: FactorResult
    flow: FactorResult
    accumulation: AccumulationResult
    timing: TimingResult
    raw_strength: float
    quality_multiplier: float
    timed_score: float


class CompositeRanker:
    """
    Scores coins and ranks them.

    The per-coin score is::

        raw     = price*Wp + volume*Wv + dex*Wd
        quality = 1 + (position-50)/100 - (risk-50)/100 + dev/200
        base    = raw*quality + structure*0.3
        final   = base * timing multiplier * sector multiplier
                  (* 1.15 on strong accumulation), clamped to 0-100

    The sector multiplier compares each coin's sector against the mean
    timed score of its sector across the whole scan, so ``rank`` runs in
    two passes.
    """

    def __init__(self, config: Optional[RankerConfig] = None, weights: Optional[FactorWeights] = None):
        self.config = config or RankerConfig()
        self.weights = weights or FactorWeights()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def score_coin(
        self,
        coin: CoinSnapshot,
        market: Optional[MarketConditions] = None,
        peers: Sequence[CoinSnapshot] = (),
        sector_mean: Optional[float] = None,
        weights: Optional[FactorWeights] = None,
    ) -> Union[ScoreBreakdown, NotRanked]:
        """Score one coin. *sector_mean* comes from a previous pass over the scan."""
        if not coin.is_listed:
            return NotRanked(symbol=coin.symbol)

        partial = self._pre_sector(coin, market, peers or (coin,), weights or self.weights)
        return self._finalise(partial, sector_mean)

    def rank(
        self,
        coins: Sequence[CoinSnapshot],
        market: Optional[MarketConditions] = None,
        weights: Optional[FactorWeights] = None,
    ) -> List[ScoreBreakdown]:
        """Score every listed coin and sort by total score, best first."""
        weights = weights or self.weights
        listed = [c for c in coins if c.is_listed]
        skipped = len(coins) - len(listed)
        if skipped:
            logger.info(f"Skipping {skipped} coins not listed on the reference exchange")

        partials = [self._pre_sector(c, market, coins, weights) for c in listed]
        sector_means = self._sector_means(partials)

        results = [self._finalise(p, sector_means.get(p.coin.sector)) for p in partials]
        results.sort(key=lambda r: (-r.total_score, r.symbol))

        logger.info(f"Ranked {len(results)} coins")
        return results

    def categorise(self, total_score: float) -> Category:
        for threshold, category in self.config.category_thresholds:
            if total_score >= threshold:
                return category
        return Category.WEAK

    def sector_multiplier(self, sector_mean: Optional[float]) -> float:
        if sector_mean is None:
            return 1.0
        for threshold, multiplier in self.config.sector_boost_tiers:
            if sector_mean > threshold:
                return multiplier
        if sector_mean < self.config.sector_penalty_below:
            return self.config.sector_penalty_multiplier
        return 1.0

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _pre_sector(
        self,
        coin: CoinSnapshot,
        market: Optional[MarketConditions],
        peers: Sequence[CoinSnapshot],
        weights: FactorWeights,
    ) -> _PreSectorScore:
        price = price_momentum_score(coin)
        volume = volume_activity_score(coin)
        position = market_position_score(coin)
        risk = risk_score(coin, market)
        dev = developer_activity_score(coin)
        structure = market_structure_score(coin)
        dex = score_dex(coin.dex_metrics)
        flow = score_flow(coin)
        accumulation = analyze_accumulation(coin)
        timing = analyze_timing(coin, market, peers)

        raw = price * weights.price + volume * weights.volume + dex.score * weights.dex
        quality = 1 + (position - 50) / 100 - (risk - 50) / 100 + dev / 200
        base = raw * quality + structure * self.config.structure_weight
        timed = base * timing.multiplier

        return _PreSectorScore(
            coin=coin,
            price=price,
            volume=volume,
            position=position,
            risk=risk,
            dev=dev,
            structure=structure,
            dex=dex,
            flow=flow,
            accumulation=accumulation,
            timing=timing,
            raw_strength=raw,
            quality_multiplier=quality,
            timed_score=timed,
        )

    def _sector_means(self, partials: Sequence[_PreSectorScore]) -> Dict[str, float]:
        grouped: Dict[str, List[float]] = defaultdict(list)
        for p in partials:
            if p.coin.sector and p.coin.sector != UNKNOWN_SECTOR:
                grouped[p.coin.sector].append(p.timed_score)

        return {
            sector: sum(scores) / len(scores)
            for sector, scores in grouped.items()
            if len(scores) >= self.config.sector_min_coins
        }

    def _finalise(self, p: _PreSectorScore, sector_mean: Optional[float]) -> ScoreBreakdown:
        cfg = self.config
        sector_mult = self.sector_multiplier(sector_mean)
        final = p.timed_score * sector_mult

        accumulation_bonus = p.accumulation.score > cfg.accumulation_bonus_threshold
        if accumulation_bonus:
            final *= cfg.accumulation_bonus_multiplier

        total = round(clamp(final, cfg.min_score, cfg.max_score), 2)

        signals = self._assemble_signals(p, sector_mult, sector_mean, accumulation_bonus)

        logger.debug(
            f"{p.coin.symbol}: raw={p.raw_strength:.2f} quality={p.quality_multiplier:.2f} "
            f"timing={p.timing.multiplier} sector={sector_mult} total={total}"
        )

        return ScoreBreakdown(
            symbol=p.coin.symbol,
            price_score=p.price,
            volume_score=p.volume,
            position_score=p.position,
            risk_score=p.risk,
            dev_score=p.dev,
            dex_score=p.dex.score,
            structure_score=p.structure,
            flow_score=p.flow.score,
            accumulation=p.accumulation,
            timing=p.timing,
            raw_strength=p.raw_strength,
            quality_multiplier=p.quality_multiplier,
            sector_multiplier=sector_mult,
            total_score=total,
            category=self.categorise(total),
            signals=signals,
        )

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------

    def _assemble_signals(
        self,
        p: _PreSectorScore,
        sector_mult: float,
        sector_mean: Optional[float],
        accumulation_bonus: bool,
    ) -> List[str]:
        coin = p.coin
        signals: List[str] = []

        if sector_mult > 1.0:
            signals.append(f"Hot sector: {coin.sector} (avg {sector_mean:.0f})")
        elif sector_mult < 1.0:
            signals.append(f"Lagging sector: {coin.sector} (avg {sector_mean:.0f})")

        smart = coin.smart_volume
        if smart is not None:
            if smart.character == VolumeCharacter.WHALE_DOMINATED:
                signals.append(f"Whale-dominated volume ({smart.whale_volume_pct:.0f}%)")
            elif smart.character == VolumeCharacter.RETAIL_DOMINATED:
                signals.append("Retail-dominated volume")

        profile = coin.volume_profile
        if profile is not None and pct_distance(coin.price, profile.poc_price) < 2:
            signals.append("Trading at the volume point of control")

        signals.extend(base_signals(coin, {"volume": p.volume, "risk": p.risk}))
        signals.extend(p.flow.signals)
        signals.extend(p.dex.signals[:2])

        if accumulation_bonus:
            bonus_pct = (self.config.accumulation_bonus_multiplier - 1) * 100
            signals.append(f"Accumulation bonus +{bonus_pct:.0f}% (score {p.accumulation.score:.0f})")
        signals.extend(p.accumulation.signals[:2])

        return signals[: self.config.max_signals]
