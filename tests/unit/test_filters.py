"""Unit tests for strategy pre-filters and the sector catalog."""

from alt_scanner.core.enums import Strategy
from alt_scanner.scanner.filters import filter_candidates, is_stablecoin, passes_criteria, unique_symbols
from alt_scanner.scanner.sectors import UNKNOWN_SECTOR, SectorCatalog, get_sector
from alt_scanner.scoring.config import StrategyCriteria, get_profile


class TestStablecoins:
    def test_symbol_match(self, make_snapshot):
        assert is_stablecoin(make_snapshot(symbol="USDT", name="Tether"))
        assert is_stablecoin(make_snapshot(symbol="FDUSD", name="First Digital"))

    def test_name_match(self, make_snapshot):
        assert is_stablecoin(make_snapshot(symbol="XYZ", name="Some USD Coin"))

    def test_regular_coin(self, make_snapshot):
        assert not is_stablecoin(make_snapshot())


class TestCriteria:
    def setup_method(self):
        self.criteria = StrategyCriteria(min_change_7d=-10, max_change_7d=20)

    def test_default_coin_passes(self, make_snapshot):
        assert passes_criteria(make_snapshot(), self.criteria)

    def test_rejections(self, make_snapshot):
        assert not passes_criteria(make_snapshot(price=5.0), self.criteria)
        assert not passes_criteria(make_snapshot(rank=150), self.criteria)
        assert not passes_criteria(make_snapshot(volume_to_mcap=0.01), self.criteria)
        assert not passes_criteria(make_snapshot(price_change_7d=30), self.criteria)
        assert not passes_criteria(make_snapshot(symbol="DAI", name="Dai"), self.criteria)

    def test_stablecoins_allowed_when_configured(self, make_snapshot):
        criteria = StrategyCriteria(exclude_stablecoins=False)
        assert passes_criteria(make_snapshot(symbol="DAI", name="Dai", price=1.0), criteria)

    def test_high_cap_gems_profile(self, make_snapshot):
        criteria = get_profile(Strategy.HIGH_CAP_GEMS).criteria
        assert passes_criteria(make_snapshot(price=25.0, rank=20, volume_to_mcap=0.03), criteria)
        assert not passes_criteria(make_snapshot(price=1.2), criteria)

    def test_filter_orders_by_weekly_change_and_limits(self, make_snapshot):
        coins = [
            make_snapshot(symbol="AAA", price_change_7d=5),
            make_snapshot(symbol="BBB", price_change_7d=15),
            make_snapshot(symbol="CCC", price_change_7d=15),
            make_snapshot(symbol="DDD", price_change_7d=50),
        ]
        result = filter_candidates(coins, self.criteria, limit=2)
        assert [c.symbol for c in result] == ["BBB", "CCC"]

    def test_unique_symbols_keeps_best_rank(self, make_snapshot):
        coins = [
            make_snapshot(symbol="ARB", name="Arbitrum Bridged", rank=90),
            make_snapshot(symbol="OP", rank=45),
            make_snapshot(symbol="ARB", rank=40),
            make_snapshot(symbol="ARB", name="Arbitrum Wrapped", rank=95),
        ]
        result = unique_symbols(coins)
        assert [(c.symbol, c.rank) for c in result] == [("ARB", 40), ("OP", 45)]
        assert result[0].name == "Arbitrum"


class TestSectors:
    def test_builtin_lookup(self):
        assert get_sector("eth") == "Layer 1"
        assert get_sector("NOPE") == UNKNOWN_SECTOR

    def test_overrides(self):
        catalog = SectorCatalog({"nope": "Custom", "ETH": "Smart Contracts"})
        assert catalog.get_sector("NOPE") == "Custom"
        assert catalog.get_sector("ETH") == "Smart Contracts"
        assert len(catalog) > 2
