"""
Alt Season Scanner

Scores and ranks altcoins with an explainable multi-factor model:
momentum, volume, risk, timing, sector rotation, DEX quality and
accumulation, with action and risk-reward advice on top.
"""

__version__ = "0.1.0"
__author__ = "Alt Scanner Team"

from .core.models import CoinSnapshot, MarketConditions
from .core.enums import Category, Strategy
from .scoring.ranker import CompositeRanker
from .scanner.market_scanner import MarketScanner

__all__ = [
    "CoinSnapshot",
    "MarketConditions",
    "Category",
    "Strategy",
    "CompositeRanker",
    "MarketScanner",
]
