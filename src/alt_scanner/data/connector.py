"""Reference exchange connector interface and the CCXT implementation."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
import logging

import pandas as pd
import ccxt.async_support as ccxt

from ..core.models import ExchangeListing

logger = logging.getLogger(__name__)

QUOTE_PREFERENCE = ("USDT", "USDC", "FDUSD", "BUSD")


class ExchangeConnector(ABC):
    """Abstract base class for the reference exchange."""

    @abstractmethod
    async def get_markets(self) -> Dict:
        """Fetch market info (all available instruments)."""
        pass

    @abstractmethod
    async def get_all_tickers(self, symbols: Optional[List[str]] = None) -> Dict:
        """Fetch tickers, all of them when *symbols* is None."""
        pass

    @abstractmethod
    async def get_ohlcv(self, symbol: str, timeframe: str = '1d', limit: int = 30) -> pd.DataFrame:
        """Get OHLCV data for a symbol."""
        pass

    @abstractmethod
    async def get_recent_trades(self, symbol: str, limit: int = 500) -> List[Dict]:
        """Get the most recent public trades."""
        pass

    @abstractmethod
    async def close(self):
        """Close connection."""
        pass


class CCXTConnector(ExchangeConnector):
    """CCXT-based spot connector."""

    def __init__(self, exchange_name: str = 'binance', config: Optional[Dict] = None):
        """Initialize CCXT connector."""
        self.exchange_name = exchange_name
        self.config = config or {}

        exchange_class = getattr(ccxt, exchange_name)
        self.exchange = exchange_class({
            'enableRateLimit': True,
            'timeout': 30000,
            'options': {'defaultType': 'spot'},
            **self.config
        })
        logger.info(f"Initialized CCXT connector for {exchange_name}")

    async def get_markets(self) -> Dict:
        """Fetch market info via CCXT load_markets."""
        try:
            markets = await self.exchange.load_markets()
            logger.debug(f"Loaded {len(markets)} markets")
            return markets
        except Exception as e:
            logger.error(f"Error loading markets: {e}")
            raise

    async def get_all_tickers(self, symbols: Optional[List[str]] = None) -> Dict:
        """Fetch all tickers at once via CCXT fetch_tickers."""
        try:
            tickers = await self.exchange.fetch_tickers(symbols)
            logger.debug(f"Fetched {len(tickers)} tickers")
            return tickers
        except Exception as e:
            logger.error(f"Error fetching tickers: {e}")
            raise

    async def get_ohlcv(self, symbol: str, timeframe: str = '1d', limit: int = 30) -> pd.DataFrame:
        """Get OHLCV data."""
        try:
            ohlcv = await self.exchange.fetch_ohlcv(symbol, timeframe, limit=limit)
            return ohlcv_to_frame(ohlcv)
        except Exception as e:
            logger.error(f"Error fetching OHLCV for {symbol}: {e}")
            raise

    async def get_recent_trades(self, symbol: str, limit: int = 500) -> List[Dict]:
        """Get recent trades as plain dicts."""
        try:
            trades = await self.exchange.fetch_trades(symbol, limit=limit)
            return [
                {
                    'price': trade['price'],
                    'amount': trade['amount'],
                    'cost': trade.get('cost') or trade['price'] * trade['amount'],
                    'side': trade['side'],
                    'timestamp': trade['timestamp'],
                }
                for trade in trades
            ]
        except Exception as e:
            logger.error(f"Error fetching trades for {symbol}: {e}")
            raise

    async def close(self):
        """Close exchange connection."""
        await self.exchange.close()
        logger.info(f"Closed connection to {self.exchange_name}")


def ohlcv_to_frame(ohlcv: Sequence[Sequence[float]]) -> pd.DataFrame:
    """CCXT OHLCV rows to a timestamp-indexed DataFrame."""
    df = pd.DataFrame(ohlcv, columns=['timestamp', 'open', 'high', 'low', 'close', 'volume'])
    df['timestamp'] = pd.to_datetime(df['timestamp'], unit='ms')
    df.set_index('timestamp', inplace=True)
    logger.debug(f"Converted {len(df)} OHLCV bars")
    return df


def find_main_pair(markets: Dict, base: str, quotes: Sequence[str] = QUOTE_PREFERENCE) -> Optional[str]:
    """Most liquid-looking active spot pair for *base*, by quote preference."""
    base = base.upper()
    for quote in quotes:
        symbol = f"{base}/{quote}"
        info = markets.get(symbol)
        if info is not None and info.get('active', True) and info.get('spot', True):
            return symbol
    return None


def build_listing(main_pair: Optional[str], ticker: Optional[Dict]) -> ExchangeListing:
    """Listing record from the main pair and its ticker."""
    if main_pair is None:
        return ExchangeListing(is_listed=False)

    ticker = ticker or {}
    info = ticker.get('info') or {}
    trades = info.get('count') if isinstance(info, dict) else None
    return ExchangeListing(
        is_listed=True,
        main_pair=main_pair,
        trades_24h=int(trades or 0),
        high_24h=float(ticker.get('high') or 0.0),
        low_24h=float(ticker.get('low') or 0.0),
    )
