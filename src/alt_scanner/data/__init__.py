"""Data acquisition: exchange connector, HTTP APIs, derived datasets, caching."""

from .cache import TTLCache
from .collector import SnapshotCollector, snapshot_from_market_row
from .connector import CCXTConnector, ExchangeConnector, build_listing, find_main_pair, ohlcv_to_frame
from .history import DominanceHistory
from .market_api import DataSourceError, MarketDataAPI

__all__ = [
    "TTLCache",
    "SnapshotCollector",
    "snapshot_from_market_row",
    "CCXTConnector",
    "ExchangeConnector",
    "build_listing",
    "find_main_pair",
    "ohlcv_to_frame",
    "DominanceHistory",
    "DataSourceError",
    "MarketDataAPI",
]
