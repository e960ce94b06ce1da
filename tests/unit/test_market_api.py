"""Unit tests for the market data HTTP client."""

import pytest
from unittest.mock import AsyncMock, patch

from alt_scanner.data.market_api import DataSourceError, MarketDataAPI


class TestMarketDataAPI:
    def setup_method(self):
        self.api = MarketDataAPI({"coingecko_api_key": "demo-key", "coingecko_base_url": None})

    def test_config_merge_ignores_none(self):
        assert self.api.config["coingecko_base_url"] == "https://api.coingecko.com/api/v3"
        assert self.api._coingecko_headers() == {"x-cg-demo-api-key": "demo-key"}
        assert MarketDataAPI()._coingecko_headers() == {}

    @pytest.mark.asyncio
    async def test_get_top_coins(self):
        rows = [{"id": "arbitrum", "symbol": "arb"}]
        with patch.object(self.api, "_get_json", AsyncMock(return_value=rows)) as get_json:
            assert await self.api.get_top_coins(50) == rows
        assert get_json.call_args.kwargs["params"]["per_page"] == 50

    @pytest.mark.asyncio
    async def test_get_top_coins_propagates_errors(self):
        with patch.object(self.api, "_get_json", AsyncMock(side_effect=DataSourceError("429"))):
            with pytest.raises(DataSourceError):
                await self.api.get_top_coins()

    @pytest.mark.asyncio
    async def test_get_top_coins_rejects_malformed_payload(self):
        with patch.object(self.api, "_get_json", AsyncMock(return_value={"error": "x"})):
            with pytest.raises(DataSourceError):
                await self.api.get_top_coins()

    @pytest.mark.asyncio
    async def test_get_btc_dominance(self):
        payload = {"data": {"market_cap_percentage": {"btc": 56.4, "eth": 13.2}}}
        with patch.object(self.api, "_get_json", AsyncMock(return_value=payload)):
            assert await self.api.get_btc_dominance() == 56.4

    @pytest.mark.asyncio
    async def test_get_btc_dominance_malformed(self):
        with patch.object(self.api, "_get_json", AsyncMock(return_value={"data": {}})):
            with pytest.raises(DataSourceError):
                await self.api.get_btc_dominance()

    @pytest.mark.asyncio
    async def test_developer_data(self):
        payload = {"developer_data": {"commit_count_4_weeks": 42, "pull_request_contributors": 12, "stars": 900}}
        with patch.object(self.api, "_get_json", AsyncMock(return_value=payload)):
            dev = await self.api.get_developer_data("arbitrum")
        assert dev.commits_4w == 42
        assert dev.contributors == 12
        assert dev.stars == 900

    @pytest.mark.asyncio
    async def test_developer_data_degrades(self):
        with patch.object(self.api, "_get_json", AsyncMock(side_effect=Exception("timeout"))):
            assert await self.api.get_developer_data("arbitrum") is None

    @pytest.mark.asyncio
    async def test_fear_greed(self):
        payload = {"data": [{"value": "27", "value_classification": "Fear"}]}
        with patch.object(self.api, "_get_json", AsyncMock(return_value=payload)):
            index = await self.api.get_fear_greed()
        assert index.value == 27
        assert index.classification == "Fear"

    @pytest.mark.asyncio
    async def test_fear_greed_degrades(self):
        with patch.object(self.api, "_get_json", AsyncMock(return_value={"data": []})):
            assert await self.api.get_fear_greed() is None

    @pytest.mark.asyncio
    async def test_eth_btc_prices(self):
        payload = {"prices": [[1, 0.051], [2, 0.052]]}
        with patch.object(self.api, "_get_json", AsyncMock(return_value=payload)):
            assert await self.api.get_eth_btc_prices() == [0.051, 0.052]

    @pytest.mark.asyncio
    async def test_search_dex_pairs_degrades(self):
        with patch.object(self.api, "_get_json", AsyncMock(side_effect=Exception("down"))):
            assert await self.api.search_dex_pairs("ARB") == []
