"""HTTP client for market-wide data: rankings, dominance, sentiment, DEX pairs."""

from typing import Any, Dict, List, Optional
import logging

import aiohttp

from ..core.models import DeveloperActivity, FearGreedIndex

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """Raised when an upstream API answers with an error or a malformed payload."""


class MarketDataAPI:
    """Async client for CoinGecko, the alternative.me fear & greed index and DexScreener."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        defaults = self._default_config()
        if config:
            defaults.update({k: v for k, v in config.items() if v is not None})
        self.config = defaults
        self._session: Optional[aiohttp.ClientSession] = None
        logger.info(f"Market data API initialized ({self.config['coingecko_base_url']})")

    @staticmethod
    def _default_config() -> Dict[str, Any]:
        return {
            "coingecko_base_url": "https://api.coingecko.com/api/v3",
            "coingecko_api_key": None,
            "fear_greed_url": "https://api.alternative.me/fng/",
            "dexscreener_base_url": "https://api.dexscreener.com/latest/dex",
            "timeout": 10,
        }

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config["timeout"])
            )
        return self._session

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(self, url: str, params: Optional[Dict] = None, headers: Optional[Dict] = None) -> Any:
        session = await self._get_session()
        async with session.get(url, params=params, headers=headers) as response:
            if response.status != 200:
                error_text = await response.text()
                raise DataSourceError(f"{url} returned {response.status}: {error_text[:200]}")
            return await response.json()

    def _coingecko_headers(self) -> Dict[str, str]:
        key = self.config.get("coingecko_api_key")
        return {"x-cg-demo-api-key": key} if key else {}

    # ------------------------------------------------------------------
    # CoinGecko
    # ------------------------------------------------------------------

    async def get_top_coins(self, limit: int = 100, currency: str = "usd") -> List[Dict]:
        """Top coins by market cap. Failures propagate: nothing can be scanned without them."""
        params = {
            "vs_currency": currency,
            "order": "market_cap_desc",
            "per_page": limit,
            "page": 1,
            "sparkline": "false",
            "price_change_percentage": "24h,7d",
        }
        try:
            data = await self._get_json(
                f"{self.config['coingecko_base_url']}/coins/markets",
                params=params,
                headers=self._coingecko_headers(),
            )
        except Exception as e:
            logger.error(f"Error fetching top coins: {e}")
            raise

        if not isinstance(data, list):
            raise DataSourceError("Unexpected /coins/markets payload")
        logger.info(f"Fetched {len(data)} coins from CoinGecko")
        return data

    async def get_btc_dominance(self) -> float:
        """BTC share of total market cap, in percent."""
        try:
            data = await self._get_json(
                f"{self.config['coingecko_base_url']}/global",
                headers=self._coingecko_headers(),
            )
            return float(data["data"]["market_cap_percentage"]["btc"])
        except (KeyError, TypeError, ValueError) as e:
            raise DataSourceError(f"Malformed /global payload: {e}") from e
        except Exception as e:
            logger.error(f"Error fetching BTC dominance: {e}")
            raise

    async def get_developer_data(self, coin_id: str) -> Optional[DeveloperActivity]:
        params = {
            "localization": "false",
            "tickers": "false",
            "market_data": "false",
            "community_data": "false",
            "developer_data": "true",
            "sparkline": "false",
        }
        try:
            data = await self._get_json(
                f"{self.config['coingecko_base_url']}/coins/{coin_id}",
                params=params,
                headers=self._coingecko_headers(),
            )
        except Exception as e:
            logger.warning(f"Could not fetch developer data for {coin_id}: {e}")
            return None

        dev = data.get("developer_data") if isinstance(data, dict) else None
        if not dev:
            return None
        return DeveloperActivity(
            commits_4w=int(dev.get("commit_count_4_weeks") or 0),
            contributors=int(dev.get("pull_request_contributors") or 0),
            stars=int(dev.get("stars") or 0),
        )

    async def get_eth_btc_prices(self, days: int = 90) -> List[float]:
        """Daily ETH price in BTC, oldest first."""
        try:
            data = await self._get_json(
                f"{self.config['coingecko_base_url']}/coins/ethereum/market_chart",
                params={"vs_currency": "btc", "days": days, "interval": "daily"},
                headers=self._coingecko_headers(),
            )
            return [float(point[1]) for point in data.get("prices", [])]
        except Exception as e:
            logger.warning(f"Could not fetch ETH/BTC history: {e}")
            return []

    # ------------------------------------------------------------------
    # Sentiment
    # ------------------------------------------------------------------

    async def get_fear_greed(self) -> Optional[FearGreedIndex]:
        try:
            data = await self._get_json(self.config["fear_greed_url"])
            latest = data["data"][0]
            index = FearGreedIndex(
                value=int(latest["value"]),
                classification=latest.get("value_classification", "Neutral"),
            )
            logger.info(f"Fear & greed: {index.value} ({index.classification})")
            return index
        except Exception as e:
            logger.warning(f"Could not fetch fear & greed index: {e}")
            return None

    # ------------------------------------------------------------------
    # DEX
    # ------------------------------------------------------------------

    async def search_dex_pairs(self, symbol: str) -> List[Dict]:
        try:
            data = await self._get_json(
                f"{self.config['dexscreener_base_url']}/search/",
                params={"q": symbol},
            )
            return data.get("pairs") or []
        except Exception as e:
            logger.warning(f"Could not search DEX pairs for {symbol}: {e}")
            return []
