"""Weight and threshold tables for the scoring engine."""

from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import Category, Strategy


class FactorWeights(BaseModel):
    """Weights of the raw-strength blend."""

    model_config = ConfigDict(frozen=True)

    price: float = Field(default=0.5, ge=0, description="Price momentum weight")
    volume: float = Field(default=0.35, ge=0, description="Volume activity weight")
    dex: float = Field(default=0.15, ge=0, description="DEX quality weight")


class StrategyCriteria(BaseModel):
    """Pre-filter bounds applied before scoring."""

    model_config = ConfigDict(frozen=True)

    min_price: float = Field(default=0.0001, ge=0, description="Minimum price in USD")
    max_price: float = Field(default=3.0, gt=0, description="Maximum price in USD")
    max_rank: int = Field(default=100, gt=0, description="Worst market-cap rank allowed")
    min_volume_to_mcap: float = Field(default=0.03, ge=0, description="Minimum 24h volume / market cap")
    min_change_7d: float = Field(default=-100.0, description="Minimum 7d change %")
    max_change_7d: float = Field(default=1000.0, description="Maximum 7d change %")
    exclude_stablecoins: bool = Field(default=True, description="Drop USD-pegged coins")


class StrategyProfile(BaseModel):
    """A named strategy: what to scan and how to weight it."""

    model_config = ConfigDict(frozen=True)

    name: Strategy
    description: str = ""
    criteria: StrategyCriteria = Field(default_factory=StrategyCriteria)
    weights: FactorWeights = Field(default_factory=FactorWeights)


class RankerConfig(BaseModel):
    """Thresholds used by the composite ranker."""

    model_config = ConfigDict(frozen=True)

    category_thresholds: Tuple[Tuple[float, Category], ...] = (
        (70.0, Category.HOT),
        (60.0, Category.STRONG),
        (50.0, Category.PROMISING),
        (40.0, Category.INTERESTING),
        (30.0, Category.NEUTRAL),
    )
    # (sector mean above, multiplier) checked in order
    sector_boost_tiers: Tuple[Tuple[float, float], ...] = ((65.0, 1.15), (58.0, 1.07))
    sector_penalty_below: float = 45.0
    sector_penalty_multiplier: float = 0.9
    sector_min_coins: int = Field(default=2, ge=1)
    structure_weight: float = 0.3
    accumulation_bonus_threshold: float = 75.0
    accumulation_bonus_multiplier: float = 1.15
    max_signals: int = Field(default=5, ge=0)
    min_score: float = 0.0
    max_score: float = 100.0


STRATEGY_PROFILES: Dict[Strategy, StrategyProfile] = {
    Strategy.MOMENTUM: StrategyProfile(
        name=Strategy.MOMENTUM,
        description="Coins already moving with strong volume",
        criteria=StrategyCriteria(min_volume_to_mcap=0.04, min_change_7d=15, max_change_7d=200),
        weights=FactorWeights(price=0.6, volume=0.3, dex=0.1),
    ),
    Strategy.VALUE: StrategyProfile(
        name=Strategy.VALUE,
        description="Quiet or pulled-back coins with healthy liquidity",
        criteria=StrategyCriteria(min_volume_to_mcap=0.03, min_change_7d=-25, max_change_7d=5),
        weights=FactorWeights(price=0.3, volume=0.4, dex=0.3),
    ),
    Strategy.BALANCED: StrategyProfile(
        name=Strategy.BALANCED,
        description="Moderate movers",
        criteria=StrategyCriteria(min_volume_to_mcap=0.03, min_change_7d=-10, max_change_7d=20),
    ),
    Strategy.HIGH_CAP_GEMS: StrategyProfile(
        name=Strategy.HIGH_CAP_GEMS,
        description="Higher-priced established coins",
        criteria=StrategyCriteria(
            min_price=3.0,
            max_price=10_000.0,
            max_rank=75,
            min_volume_to_mcap=0.02,
            min_change_7d=-15,
            max_change_7d=100,
        ),
    ),
}


def get_profile(strategy: Strategy) -> StrategyProfile:
    """Look up a built-in strategy profile."""
    return STRATEGY_PROFILES[Strategy(strategy)]
