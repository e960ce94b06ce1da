"""Strategy pre-filters applied before scoring."""

import logging
from typing import Dict, Iterable, List

from ..core.models import CoinSnapshot
from ..scoring.config import StrategyCriteria

logger = logging.getLogger(__name__)

STABLECOINS = frozenset({
    "usdt", "usdc", "busd", "dai", "tusd", "usdp", "usdd",
    "gusd", "frax", "lusd", "usdn", "fdusd", "pyusd",
})


def is_stablecoin(coin: CoinSnapshot) -> bool:
    name = coin.name.lower()
    return coin.symbol.lower() in STABLECOINS or "usd" in name or "tether" in name


def passes_criteria(coin: CoinSnapshot, criteria: StrategyCriteria) -> bool:
    if not criteria.min_price <= coin.price <= criteria.max_price:
        return False
    if coin.rank > criteria.max_rank:
        return False
    if coin.volume_to_mcap < criteria.min_volume_to_mcap:
        return False
    if not criteria.min_change_7d <= coin.price_change_7d <= criteria.max_change_7d:
        return False
    if criteria.exclude_stablecoins and is_stablecoin(coin):
        return False
    return True


def unique_symbols(coins: Iterable[CoinSnapshot]) -> List[CoinSnapshot]:
    """One snapshot per ticker, the best market-cap rank winning; first-seen order kept."""
    best: Dict[str, CoinSnapshot] = {}
    total = 0
    for coin in coins:
        total += 1
        kept = best.get(coin.symbol)
        if kept is None or coin.rank < kept.rank:
            best[coin.symbol] = coin

    if len(best) < total:
        logger.warning(f"Dropped {total - len(best)} snapshots sharing a ticker with a higher-ranked coin")
    return list(best.values())


def filter_candidates(
    coins: Iterable[CoinSnapshot],
    criteria: StrategyCriteria,
    limit: int = 40,
) -> List[CoinSnapshot]:
    """Coins passing *criteria*, strongest 7d movers first, at most *limit*."""
    coins = list(coins)
    passed = [c for c in coins if passes_criteria(c, criteria)]
    passed.sort(key=lambda c: (-c.price_change_7d, c.symbol))
    logger.debug(f"{len(passed)}/{len(coins)} coins passed pre-filter")
    return passed[:limit]
