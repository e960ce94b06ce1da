"""Core module for the scanner."""

from .models import (
    CoinSnapshot, MarketConditions, ExchangeListing, WhaleActivity,
    DexMetrics, DeveloperActivity, ExchangeFlow, VolumeProfile,
    SmartVolume, FearGreedIndex,
)
from .enums import (
    Category, AccumulationCategory, TimingAction, ActionDecision,
    Confidence, RiskRewardDecision, Strategy, VolumeCharacter,
    TrendDirection, MarketPhase, RiskLevel,
)

__all__ = [
    "CoinSnapshot",
    "MarketConditions",
    "ExchangeListing",
    "WhaleActivity",
    "DexMetrics",
    "DeveloperActivity",
    "ExchangeFlow",
    "VolumeProfile",
    "SmartVolume",
    "FearGreedIndex",
    "Category",
    "AccumulationCategory",
    "TimingAction",
    "ActionDecision",
    "Confidence",
    "RiskRewardDecision",
    "Strategy",
    "VolumeCharacter",
    "TrendDirection",
    "MarketPhase",
    "RiskLevel",
]
