"""Unit tests for exchange net-flow scoring."""

from alt_scanner.core.models import ExchangeFlow
from alt_scanner.scoring.flow import NEUTRAL_FLOW_SCORE, flow_score, netflow_ratio, score_flow


class TestFlowScore:
    def setup_method(self):
        self.market_cap = 1_000_000_000

    def _coin(self, make_snapshot, netflow):
        return make_snapshot(market_cap=self.market_cap, exchange_flow=ExchangeFlow(netflow_24h_usd=netflow))

    def test_missing_flow_is_neutral(self, make_snapshot):
        assert flow_score(make_snapshot()) == NEUTRAL_FLOW_SCORE
        assert score_flow(make_snapshot()).signals == []

    def test_missing_market_cap_is_neutral(self, make_snapshot):
        coin = make_snapshot(market_cap=None, exchange_flow=ExchangeFlow(netflow_24h_usd=-5_000_000))
        assert netflow_ratio(coin) is None
        assert flow_score(coin) == NEUTRAL_FLOW_SCORE

    def test_large_outflow(self, make_snapshot):
        coin = self._coin(make_snapshot, -6_000_000)
        assert flow_score(coin) == 95
        assert score_flow(coin).signals == ["Large exchange outflow - strong accumulation"]

    def test_small_outflow(self, make_snapshot):
        assert flow_score(self._coin(make_snapshot, -1_000_000)) == 60

    def test_inflow(self, make_snapshot):
        coin = self._coin(make_snapshot, 2_000_000)
        assert flow_score(coin) == 25
        assert score_flow(coin).signals == ["Exchange inflows - watch for distribution"]

    def test_heavy_inflow(self, make_snapshot):
        assert flow_score(self._coin(make_snapshot, 6_000_000)) == 5

    def test_zero_flow(self, make_snapshot):
        assert flow_score(self._coin(make_snapshot, 0)) == NEUTRAL_FLOW_SCORE
