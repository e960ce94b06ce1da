"""Market scanner: strategy pre-filters, ranking runs and report aggregates."""

from .market_phase import MarketCondition, PhaseInfo, get_market_condition, get_market_phase
from .market_scanner import MarketScanner
from .models import (
    CrossStrategyAnalysis, MultiStrategyCoin, RankedCoin, ScanReport,
    ScanStats, SectorAggregate, StrategyPerformance, StrategyResult,
)
from .sectors import SECTOR_MAPPING, SectorCatalog, get_sector

__all__ = [
    "MarketScanner",
    "MarketCondition",
    "PhaseInfo",
    "get_market_condition",
    "get_market_phase",
    "CrossStrategyAnalysis",
    "MultiStrategyCoin",
    "RankedCoin",
    "ScanReport",
    "ScanStats",
    "SectorAggregate",
    "StrategyPerformance",
    "StrategyResult",
    "SECTOR_MAPPING",
    "SectorCatalog",
    "get_sector",
]
