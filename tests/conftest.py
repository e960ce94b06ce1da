"""Pytest configuration and fixtures."""

import pytest
import pandas as pd

from alt_scanner.core.models import (
    CoinSnapshot, DexMetrics, ExchangeListing, FearGreedIndex, MarketConditions,
)


def _klines(closes, spread=0.02, volume=1000.0):
    """Daily candles where each open is the previous close."""
    closes = [float(c) for c in closes]
    opens = [closes[0]] + closes[:-1]
    dates = pd.date_range(start='2024-01-01', periods=len(closes), freq='1D')
    return pd.DataFrame({
        'open': opens,
        'high': [max(o, c) * (1 + spread) for o, c in zip(opens, closes)],
        'low': [min(o, c) * (1 - spread) for o, c in zip(opens, closes)],
        'close': closes,
        'volume': [volume] * len(closes),
    }, index=dates)


def _snapshot(**overrides):
    data = {
        'symbol': 'ARB',
        'name': 'Arbitrum',
        'rank': 40,
        'price': 1.2,
        'price_change_24h': 2.0,
        'price_change_7d': 12.0,
        'volume_to_mcap': 0.08,
        'sector': 'Layer 2',
        'market_cap': 1_500_000_000,
        'binance_listing': ExchangeListing(
            is_listed=True,
            main_pair='ARB/USDT',
            trades_24h=600_000,
            high_24h=1.26,
            low_24h=1.14,
        ),
    }
    data.update(overrides)
    return CoinSnapshot(**data)


@pytest.fixture
def make_klines():
    """Factory for daily OHLCV frames."""
    return _klines


@pytest.fixture
def make_snapshot():
    """Factory for a listed mid-cap snapshot; keyword arguments override fields."""
    return _snapshot


@pytest.fixture
def neutral_market():
    """Market with mid-range dominance and no optional readings."""
    return MarketConditions(btc_dominance=58.0)


@pytest.fixture
def alt_season_market():
    """Market conditions favourable to altcoins."""
    return MarketConditions(
        btc_dominance=44.0,
        fear_greed=FearGreedIndex(value=30, classification='Fear'),
        dominance_change_24h=-1.5,
    )


@pytest.fixture
def strong_dex():
    """DEX metrics with every indicator at its best tier."""
    return DexMetrics(
        liquidity_score=100,
        volume_quality_score=100,
        buy_pressure=70,
        unique_dexes=6,
        total_txns_24h=20_000,
        total_volume_24h=5_000_000,
        total_liquidity=12_000_000,
    )
