"""Unit tests for SnapshotCollector."""

from datetime import datetime, timedelta

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from alt_scanner.core.models import DeveloperActivity
from alt_scanner.data.cache import TTLCache
from alt_scanner.data.collector import SnapshotCollector, snapshot_from_market_row
from alt_scanner.data.history import DominanceHistory
from alt_scanner.data.market_api import DataSourceError


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def _row(symbol, coin_id, rank, price=2.0, **overrides):
    row = {
        "id": coin_id,
        "symbol": symbol.lower(),
        "name": coin_id.title(),
        "market_cap_rank": rank,
        "current_price": price,
        "market_cap": 1_000_000_000,
        "total_volume": 80_000_000,
        "price_change_percentage_24h_in_currency": 1.5,
        "price_change_percentage_7d_in_currency": 9.0,
    }
    row.update(overrides)
    return row


ROWS = [
    _row("LDO", "lido-dao", 30),
    _row("OP", "optimism", 45),
    _row("BAD", "broken", 50, price=None),
]


def _dex_pair(symbol="LDO"):
    return {
        "dexId": "uniswap",
        "baseToken": {"symbol": symbol},
        "volume": {"h24": 2_000_000},
        "liquidity": {"usd": 2_000_000},
        "txns": {"h24": {"buys": 600, "sells": 400}},
    }


class TestSnapshotFromMarketRow:
    def test_maps_fields(self):
        snapshot = snapshot_from_market_row(ROWS[0], sector="DeFi")
        assert snapshot.symbol == "LDO"
        assert snapshot.rank == 30
        assert snapshot.price_change_7d == 9.0
        assert snapshot.volume_to_mcap == pytest.approx(0.08)
        assert snapshot.coin_id == "lido-dao"
        assert snapshot.sector == "DeFi"

    def test_falls_back_to_plain_24h_change(self):
        row = _row("LDO", "lido-dao", 30, price_change_percentage_24h_in_currency=None,
                   price_change_percentage_24h=-3.0)
        assert snapshot_from_market_row(row).price_change_24h == -3.0

    def test_zero_market_cap(self):
        row = _row("LDO", "lido-dao", 30, market_cap=0)
        snapshot = snapshot_from_market_row(row)
        assert snapshot.volume_to_mcap == 0.0
        assert snapshot.market_cap is None

    def test_malformed_rows_are_skipped(self):
        assert snapshot_from_market_row(ROWS[2]) is None
        assert snapshot_from_market_row({"id": "x"}) is None


class TestSnapshotCollector:
    def setup_method(self):
        self.api = MagicMock()
        self.api.get_top_coins = AsyncMock(return_value=ROWS)
        self.api.get_btc_dominance = AsyncMock(return_value=55.0)
        self.api.get_fear_greed = AsyncMock(return_value=None)
        self.api.get_eth_btc_prices = AsyncMock(return_value=[])
        self.api.search_dex_pairs = AsyncMock(return_value=[_dex_pair()])
        self.api.get_developer_data = AsyncMock(
            return_value=DeveloperActivity(commits_4w=40, contributors=12, stars=900)
        )
        self.api.close = AsyncMock()

        self.connector = MagicMock()
        self.connector.get_markets = AsyncMock(return_value={"LDO/USDT": {"active": True, "spot": True}})
        self.connector.get_all_tickers = AsyncMock(return_value={
            "LDO/USDT": {"high": 2.1, "low": 1.9, "info": {"count": "250000"}},
        })
        self.connector.close = AsyncMock()

        self.cache = TTLCache()
        self.collector = SnapshotCollector(
            self.api, self.connector, cache=self.cache, config={"batch_delay": 0}
        )

    @pytest.mark.asyncio
    async def test_collect_snapshots(self):
        snapshots = await self.collector.collect_snapshots()

        assert [s.symbol for s in snapshots] == ["LDO", "OP"]
        ldo, op = snapshots
        assert ldo.is_listed
        assert ldo.binance_listing.main_pair == "LDO/USDT"
        assert ldo.binance_listing.trades_24h == 250_000
        assert ldo.sector == "DeFi"
        assert not op.is_listed
        assert op.sector == "Unknown"
        self.connector.get_all_tickers.assert_awaited_once_with(["LDO/USDT"])

    @pytest.mark.asyncio
    async def test_injected_empty_cache_is_used(self):
        await self.collector.collect_snapshots()
        await self.collector.collect_snapshots()

        assert self.collector.cache is self.cache
        self.api.get_top_coins.assert_awaited_once()
        self.connector.get_markets.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_top_coins_failure_propagates(self):
        self.api.get_top_coins = AsyncMock(side_effect=DataSourceError("429"))
        with pytest.raises(DataSourceError):
            await self.collector.collect_snapshots()

    @pytest.mark.asyncio
    async def test_collect_market_conditions(self):
        market = await self.collector.collect_market_conditions()

        assert market.btc_dominance == 55.0
        assert market.fear_greed is None
        assert market.dominance_change_24h is None
        assert market.eth_btc_trend is None

    @pytest.mark.asyncio
    async def test_dominance_change_across_runs(self, tmp_path):
        clock = Clock(datetime(2024, 3, 1, 12, 0))
        path = tmp_path / "btc-dominance-history.json"
        changes = []
        for dominance in (60.0, 57.0):
            # each run builds a fresh cache and reloads the history file
            self.api.get_btc_dominance = AsyncMock(return_value=dominance)
            collector = SnapshotCollector(
                self.api, self.connector, TTLCache(), {"batch_delay": 0},
                history=DominanceHistory(path, clock=clock),
            )
            market = await collector.collect_market_conditions()
            changes.append(market.dominance_change_24h)
            clock.now += timedelta(hours=25)

        assert changes == [None, -3.0]

    @pytest.mark.asyncio
    async def test_repeat_reading_within_a_day_has_no_change(self):
        await self.collector.collect_market_conditions()
        market = await self.collector.collect_market_conditions()

        assert market.dominance_change_24h is None
        assert len(self.collector.history) == 2

    @pytest.mark.asyncio
    async def test_duplicate_tickers_keep_best_rank(self):
        self.api.get_top_coins = AsyncMock(return_value=ROWS + [_row("LDO", "ldo-imposter", 90)])
        snapshots = await self.collector.collect_snapshots()

        assert [s.symbol for s in snapshots] == ["LDO", "OP"]
        assert snapshots[0].coin_id == "lido-dao"
        assert snapshots[0].rank == 30

    @pytest.mark.asyncio
    async def test_enrich_listed_coin(self, make_klines):
        self.connector.get_ohlcv = AsyncMock(return_value=make_klines([1.0, 1.1, 1.2]))
        self.connector.get_recent_trades = AsyncMock(return_value=[
            {"price": 2.0, "amount": 50_000, "cost": 100_000, "side": "buy"},
        ])
        snapshots = await self.collector.collect_snapshots()

        ldo, op = await self.collector.enrich(snapshots)

        assert ldo.candle_count == 3
        assert ldo.whale_activity.large_buys == 1
        assert ldo.smart_volume is not None
        assert ldo.volume_profile is not None
        assert ldo.dex_metrics.has_dex_data
        assert ldo.developer_activity.commits_4w == 40
        # unlisted coins get no exchange data
        assert op.klines is None
        assert op.whale_activity is None
        assert not op.dex_metrics.has_dex_data
        assert self.connector.get_ohlcv.await_count == 2

    @pytest.mark.asyncio
    async def test_enrich_degrades_on_fetch_errors(self, make_snapshot):
        self.connector.get_ohlcv = AsyncMock(side_effect=Exception("timeout"))
        self.connector.get_recent_trades = AsyncMock(side_effect=Exception("timeout"))
        self.api.search_dex_pairs = AsyncMock(side_effect=Exception("down"))
        self.api.get_developer_data = AsyncMock(side_effect=Exception("down"))

        (coin,) = await self.collector.enrich([make_snapshot(coin_id="arbitrum")])

        assert coin.klines is None
        assert coin.whale_activity is None
        assert not coin.dex_metrics.has_dex_data
        assert coin.developer_activity is None

    @pytest.mark.asyncio
    async def test_optional_fetches_can_be_disabled(self, make_snapshot):
        collector = SnapshotCollector(
            self.api, self.connector,
            config={"fetch_dex": False, "fetch_developer": False, "batch_delay": 0},
        )
        self.connector.get_ohlcv = AsyncMock(return_value=None)
        self.connector.get_recent_trades = AsyncMock(return_value=[])

        (coin,) = await collector.enrich([make_snapshot(coin_id="arbitrum")])

        assert coin.dex_metrics is None
        assert coin.developer_activity is None
        self.api.search_dex_pairs.assert_not_awaited()
        self.api.get_developer_data.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enrich_sleeps_between_batches(self, make_snapshot):
        collector = SnapshotCollector(
            self.api, self.connector,
            config={"batch_size": 2, "batch_delay": 0.5, "fetch_dex": False, "fetch_developer": False},
        )
        coins = [make_snapshot(symbol=s, binance_listing=None) for s in ("A", "B", "C", "D", "E")]

        with patch("alt_scanner.data.collector.asyncio.sleep", new=AsyncMock()) as sleep:
            enriched = await collector.enrich(coins)

        assert [c.symbol for c in enriched] == ["A", "B", "C", "D", "E"]
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    @pytest.mark.asyncio
    async def test_collect_and_close(self):
        self.connector.get_ohlcv = AsyncMock(return_value=None)
        self.connector.get_recent_trades = AsyncMock(return_value=[])

        snapshots, market = await self.collector.collect()
        await self.collector.close()

        assert len(snapshots) == 2
        assert market.btc_dominance == 55.0
        self.api.close.assert_awaited_once()
        self.connector.close.assert_awaited_once()
