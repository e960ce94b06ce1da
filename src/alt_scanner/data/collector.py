"""Assembles CoinSnapshot and MarketConditions from the data collaborators."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..core.models import CoinSnapshot, ExchangeListing, MarketConditions
from ..scanner.filters import unique_symbols
from ..scanner.sectors import SectorCatalog
from . import analytics
from .cache import TTLCache
from .connector import ExchangeConnector, build_listing, find_main_pair
from .history import DominanceHistory
from .market_api import MarketDataAPI

logger = logging.getLogger(__name__)


def snapshot_from_market_row(
    row: Dict[str, Any],
    listing: Optional[ExchangeListing] = None,
    sector: str = "Unknown",
) -> Optional[CoinSnapshot]:
    """CoinGecko /coins/markets row to a snapshot; None when the row is unusable."""
    market_cap = row.get("market_cap") or 0
    volume = row.get("total_volume") or 0
    try:
        return CoinSnapshot(
            symbol=row["symbol"],
            name=row.get("name") or row["symbol"],
            rank=row.get("market_cap_rank"),
            price=row.get("current_price"),
            price_change_24h=row.get("price_change_percentage_24h_in_currency")
            or row.get("price_change_percentage_24h") or 0.0,
            price_change_7d=row.get("price_change_percentage_7d_in_currency") or 0.0,
            volume_to_mcap=volume / market_cap if market_cap > 0 else 0.0,
            market_cap=market_cap or None,
            coin_id=row.get("id"),
            sector=sector,
            binance_listing=listing,
        )
    except (KeyError, ValidationError) as e:
        logger.warning(f"Skipping malformed market row {row.get('id')}: {e}")
        return None


class SnapshotCollector:
    """
    Fetches everything the scorer needs.

    Per-coin fetches run in batches of ``batch_size`` with ``batch_delay``
    seconds between batches. A failing optional dataset degrades to None;
    failures of the coin list or of the exchange market list propagate.
    """

    def __init__(
        self,
        api: MarketDataAPI,
        connector: ExchangeConnector,
        cache: Optional[TTLCache] = None,
        config: Optional[Dict] = None,
        sectors: Optional[SectorCatalog] = None,
        history: Optional[DominanceHistory] = None,
    ):
        defaults = self._default_config()
        if config:
            defaults.update(config)
        self.config = defaults
        self.api = api
        self.connector = connector
        self.cache = cache if cache is not None else TTLCache()
        self.sectors = sectors if sectors is not None else SectorCatalog()
        self.history = history if history is not None else DominanceHistory()
        logger.info(
            f"Snapshot collector initialized (batch_size={self.config['batch_size']}, "
            f"batch_delay={self.config['batch_delay']}s)"
        )

    @staticmethod
    def _default_config() -> Dict:
        return {
            "top_coins_limit": 100,
            "batch_size": 5,
            "batch_delay": 1.0,
            "klines_timeframe": "1d",
            "klines_limit": 30,
            "trades_limit": 500,
            "profile_timeframe": "1h",
            "profile_limit": 24,
            "fetch_dex": True,
            "fetch_developer": True,
            # cache TTLs in seconds
            "market_ttl": 300,
            "listing_ttl": 3600,
            "dex_ttl": 600,
            "developer_ttl": 86400,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def collect_market_conditions(self) -> MarketConditions:
        """Dominance (required) plus optional sentiment and ETH/BTC trend."""
        ttl = self.config["market_ttl"]
        dominance = await self._cached("market:btc_dominance", ttl, self.api.get_btc_dominance)
        fear_greed = await self._cached("market:fear_greed", ttl, self.api.get_fear_greed)
        eth_btc = await self._cached("market:eth_btc", ttl, self.api.get_eth_btc_prices)

        return MarketConditions(
            btc_dominance=dominance,
            fear_greed=fear_greed,
            dominance_change_24h=self._dominance_change(dominance),
            eth_btc_trend=analytics.eth_btc_trend(eth_btc or []),
        )

    async def collect_snapshots(self) -> List[CoinSnapshot]:
        """Base snapshots for the top coins with listing status and sector."""
        rows = await self._cached(
            "market:top_coins",
            self.config["market_ttl"],
            lambda: self.api.get_top_coins(self.config["top_coins_limit"]),
        )
        markets = await self._cached("exchange:markets", self.config["listing_ttl"], self.connector.get_markets)

        pairs = {row["symbol"]: find_main_pair(markets, row["symbol"]) for row in rows if row.get("symbol")}
        listed_pairs = [p for p in pairs.values() if p]
        tickers = await self.connector.get_all_tickers(listed_pairs) if listed_pairs else {}

        snapshots: List[CoinSnapshot] = []
        for row in rows:
            symbol = row.get("symbol")
            if not symbol:
                continue
            pair = pairs.get(symbol)
            listing = build_listing(pair, tickers.get(pair) if pair else None)
            snapshot = snapshot_from_market_row(row, listing, self.sectors.get_sector(symbol))
            if snapshot is not None:
                snapshots.append(snapshot)

        # tickers are not unique upstream; exchange pairs are keyed by ticker
        snapshots = unique_symbols(snapshots)
        listed =sum(1 for s in snapshots if s.is_listed)
        logger.info(f"Collected {len(snapshots)} snapshots ({listed} listed on {len(markets)} markets)")
        return snapshots

    async def enrich(self, snapshots: Sequence[CoinSnapshot]) -> List[CoinSnapshot]:
        """Attach optional datasets, batch by batch."""
        batch_size = max(1, self.config["batch_size"])
        enriched: List[CoinSnapshot] = []

        for start in range(0, len(snapshots), batch_size):
            batch = snapshots[start:start + batch_size]
            results = await asyncio.gather(*(self._enrich_one(coin) for coin in batch))
            enriched.extend(results)

            if start + batch_size < len(snapshots) and self.config["batch_delay"] > 0:
                await asyncio.sleep(self.config["batch_delay"])

        logger.info(f"Enriched {len(enriched)} snapshots")
        return enriched

    async def collect(self):
        """Market conditions and fully enriched snapshots for every top coin."""
        market = await self.collect_market_conditions()
        snapshots = await self.enrich(await self.collect_snapshots())
        return snapshots, market

    async def close(self):
        await self.api.close()
        await self.connector.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _cached(self, key: str, ttl: float, fetch: Callable[[], Awaitable[Any]]) -> Any:
        value = self.cache.get(key)
        if value is not None:
            return value
        value = await fetch()
        if value is not None:
            self.cache.set(key, value, ttl)
        return value

    def _dominance_change(self, dominance: float) -> Optional[float]:
        """Record the reading; change against the history sample from about a day ago."""
        self.history.record(dominance)
        return self.history.change(hours=24)

    async def _optional(self, label: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await fetch()
        except Exception as e:
            logger.warning(f"{label} unavailable: {e}")
            return None

    async def _enrich_one(self, coin: CoinSnapshot) -> CoinSnapshot:
        update: Dict[str, Any] = {}

        if coin.is_listed:
            pair = coin.binance_listing.main_pair
            klines, trades, hourly = await asyncio.gather(
                self._optional(
                    f"{coin.symbol} klines",
                    lambda: self.connector.get_ohlcv(pair, self.config["klines_timeframe"], self.config["klines_limit"]),
                ),
                self._optional(
                    f"{coin.symbol} trades",
                    lambda: self.connector.get_recent_trades(pair, self.config["trades_limit"]),
                ),
                self._optional(
                    f"{coin.symbol} hourly candles",
                    lambda: self.connector.get_ohlcv(pair, self.config["profile_timeframe"], self.config["profile_limit"]),
                ),
            )
            if klines is not None:
                update["klines"] = klines
            if trades:
                update["whale_activity"] = analytics.whale_activity(trades)
                update["smart_volume"] = analytics.smart_volume(trades)
            if hourly is not None:
                update["volume_profile"] = analytics.volume_profile(hourly)

        if self.config["fetch_dex"]:
            pairs = await self._optional(
                f"{coin.symbol} DEX pairs",
                lambda: self._cached(f"dex:{coin.symbol}", self.config["dex_ttl"],
                                     lambda: self.api.search_dex_pairs(coin.symbol)),
            )
            update["dex_metrics"] = analytics.dex_metrics(pairs or [], coin.symbol)

        if self.config["fetch_developer"] and coin.coin_id:
            update["developer_activity"] = await self._optional(
                f"{coin.symbol} developer data",
                lambda: self._cached(f"dev:{coin.coin_id}", self.config["developer_ttl"],
                                     lambda: self.api.get_developer_data(coin.coin_id)),
            )

        return coin.model_copy(update=update)
