"""Core data models for the scanner."""

from typing import Dict, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import TrendDirection, VolumeCharacter

KLINE_COLUMNS = ("open", "high", "low", "close", "volume")


class ExchangeListing(BaseModel):
    """Reference exchange listing data."""

    model_config = ConfigDict(frozen=True)

    is_listed: bool = Field(description="Coin trades on the reference exchange")
    main_pair: Optional[str] = Field(default=None, description="Main trading pair id, e.g. ARBUSDT")
    trades_24h: int = Field(default=0, ge=0, description="24h trade count")
    high_24h: float = Field(default=0.0, ge=0, description="24h high")
    low_24h: float = Field(default=0.0, ge=0, description="24h low")

    @property
    def price_range_24h(self) -> float:
        """High-low range as % of the low."""
        if self.low_24h <= 0:
            return 0.0
        return (self.high_24h - self.low_24h) / self.low_24h * 100


class WhaleActivity(BaseModel):
    """Large-trade activity over a recent trade window."""

    model_config = ConfigDict(frozen=True)

    large_buys: int = Field(default=0, ge=0, description="Large buy trades")
    large_sells: int = Field(default=0, ge=0, description="Large sell trades")
    buy_pressure: float = Field(default=0.5, ge=0.0, le=1.0, description="Share of large trades that were buys")
    avg_large_trade_size: float = Field(default=0.0, ge=0, description="Average large trade size in USD")

    @property
    def total_large_trades(self) -> int:
        return self.large_buys + self.large_sells


class DexMetrics(BaseModel):
    """Aggregated decentralized-exchange metrics."""

    model_config = ConfigDict(frozen=True)

    has_dex_data: bool = Field(default=True, description="False marks the no-data sentinel")
    liquidity_score: float = Field(default=0.0, ge=0, le=100, description="Liquidity tier score")
    volume_quality_score: float = Field(default=0.0, ge=0, le=100, description="Organic volume score")
    buy_pressure: float = Field(default=50.0, ge=0, le=100, description="Buy transactions as % of all")
    unique_dexes: int = Field(default=0, ge=0, description="Number of distinct DEXes")
    total_txns_24h: int = Field(default=0, ge=0, description="24h transaction count")
    total_volume_24h: float = Field(default=0.0, ge=0, description="24h DEX volume in USD")
    total_liquidity: float = Field(default=0.0, ge=0, description="Pooled liquidity in USD")

    @classmethod
    def no_data(cls) -> "DexMetrics":
        return cls(has_dex_data=False)


class DeveloperActivity(BaseModel):
    """Repository activity."""

    model_config = ConfigDict(frozen=True)

    commits_4w: int = Field(default=0, ge=0, description="Commits in the last 4 weeks")
    contributors: int = Field(default=0, ge=0, description="Contributor count")
    stars: int = Field(default=0, ge=0, description="Star count")


class ExchangeFlow(BaseModel):
    """Net exchange flows (positive = inflow to exchanges)."""

    model_config = ConfigDict(frozen=True)

    netflow_24h_usd: float = Field(description="24h net exchange flow in USD")
    netflow_7d_usd: Optional[float] = Field(default=None, description="7d net exchange flow in USD")


class VolumeProfile(BaseModel):
    """Intraday volume profile levels."""

    model_config = ConfigDict(frozen=True)

    poc_price: float = Field(gt=0, description="Point of control price")
    value_area_low: float = Field(gt=0, description="Value area low")
    value_area_high: float = Field(gt=0, description="Value area high")


class SmartVolume(BaseModel):
    """Trade-size bucketed volume distribution."""

    model_config = ConfigDict(frozen=True)

    buckets: Dict[str, float] = Field(default_factory=dict, description="Volume % per trade-size bucket")
    whale_volume_pct: float = Field(default=0.0, ge=0, le=100, description="Whale bucket volume %")
    retail_volume_pct: float = Field(default=0.0, ge=0, le=100, description="Micro + retail bucket volume %")
    buy_pressure: float = Field(default=50.0, ge=0, le=100, description="Taker-buy volume %")
    character: VolumeCharacter = Field(default=VolumeCharacter.BALANCED, description="Dominant character")


class FearGreedIndex(BaseModel):
    """Fear & greed index reading."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(ge=0, le=100, description="Index value")
    classification: str = Field(default="Neutral", description="Text classification")


class CoinSnapshot(BaseModel):
    """Per-scan coin input assembled by the data collaborators."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    symbol: str = Field(description="Ticker symbol")
    name: str = Field(description="Coin name")
    rank: int = Field(gt=0, description="Market-cap rank")
    price: float = Field(gt=0, description="Current price in USD")
    price_change_24h: float = Field(default=0.0, description="24h price change %")
    price_change_7d: float = Field(default=0.0, description="7d price change %")
    volume_to_mcap: float = Field(default=0.0, ge=0, description="24h volume / market cap")
    sector: str = Field(default="Unknown", description="Sector label")
    market_cap: Optional[float] = Field(default=None, ge=0, description="Market cap in USD")
    coin_id: Optional[str] = Field(default=None, description="Upstream coin identifier")

    binance_listing: Optional[ExchangeListing] = None
    klines: Optional[pd.DataFrame] = Field(default=None, description="Daily OHLCV, chronological")
    whale_activity: Optional[WhaleActivity] = None
    dex_metrics: Optional[DexMetrics] = None
    developer_activity: Optional[DeveloperActivity] = None
    exchange_flow: Optional[ExchangeFlow] = None
    volume_profile: Optional[VolumeProfile] = None
    smart_volume: Optional[SmartVolume] = None

    @field_validator("symbol")
    @classmethod
    def normalise_symbol(cls, v):
        return v.upper()

    @field_validator("klines", mode="before")
    @classmethod
    def validate_klines(cls, v):
        if v is None:
            return None
        if not isinstance(v, pd.DataFrame):
            v = pd.DataFrame(list(v))
        missing = [c for c in KLINE_COLUMNS if c not in v.columns]
        if missing and not v.empty:
            raise ValueError(f"klines missing columns: {missing}")
        return v

    @property
    def is_listed(self) -> bool:
        return self.binance_listing is not None and self.binance_listing.is_listed

    @property
    def candle_count(self) -> int:
        return 0 if self.klines is None else len(self.klines)


class MarketConditions(BaseModel):
    """Scan-wide market context."""

    model_config = ConfigDict(frozen=True)

    btc_dominance: float = Field(ge=0, le=100, description="BTC dominance %")
    fear_greed: Optional[FearGreedIndex] = Field(default=None, description="Fear & greed reading")
    dominance_change_24h: Optional[float] = Field(default=None, description="24h dominance change in points")
    altcoin_season_index: Optional[float] = Field(default=None, ge=0, le=100, description="Altcoin season index")
    eth_btc_trend: Optional[TrendDirection] = Field(default=None, description="ETH/BTC trend")
