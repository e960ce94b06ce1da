"""Command-line runner: one live scan printed as a plain-text report."""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .core.enums import Strategy
from .data.cache import TTLCache
from .data.collector import SnapshotCollector
from .data.connector import CCXTConnector
from .data.history import DominanceHistory
from .data.market_api import MarketDataAPI
from .scanner.market_scanner import MarketScanner
from .scanner.models import RankedCoin, ScanReport

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = "alt_scanner.log"):
    """Log to stdout and, optionally, a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, (level or os.getenv('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def _config_from_env() -> Dict:
    """Build config dict from environment variables."""
    config: Dict = {'api': {}, 'exchange': {}, 'collector': {}, 'scanner': {}, 'history': {}}

    config['api']['coingecko_api_key'] = os.getenv('COINGECKO_API_KEY', '').strip() or None
    config['api']['coingecko_base_url'] = os.getenv('COINGECKO_BASE_URL', '').strip() or None
    config['exchange']['name'] = os.getenv('EXCHANGE_NAME', '').strip() or 'binance'
    config['history']['path'] = (
        os.getenv('DOMINANCE_HISTORY_FILE', '').strip()
        or str(Path.home() / '.alt_scanner' / 'btc-dominance-history.json')
    )

    top_coins = os.getenv('SCANNER_TOP_COINS', '').strip()
    if top_coins:
        config['collector']['top_coins_limit'] = int(top_coins)
    batch_delay = os.getenv('SCANNER_BATCH_DELAY', '').strip()
    if batch_delay:
        config['collector']['batch_delay'] = float(batch_delay)

    top_n = os.getenv('SCANNER_TOP_N', '').strip()
    if top_n:
        config['scanner']['top_n'] = int(top_n)
    strategies_raw = os.getenv('SCANNER_STRATEGIES', '').strip()
    if strategies_raw:
        config['scanner']['strategies'] = [
            Strategy(s.strip().upper()) for s in strategies_raw.split(',') if s.strip()
        ]

    return config


# ------------------------------------------------------------------
# Report rendering
# ------------------------------------------------------------------

def _coin_line(position: int, coin: RankedCoin) -> str:
    score = coin.score
    action = score.action_signal.action.value if score.action_signal else "-"
    rr = score.risk_reward
    rr_text = f"R:R 1:{rr.ratio:.1f} EV {rr.expected_value:+.1f}%" if rr else ""
    return (
        f"{position:>2}. {coin.symbol:<8} {score.total_score:6.2f}  {score.category.value:<11} "
        f"{coin.snapshot.sector:<14} {action:<18} {rr_text}"
    )


def format_report(report: ScanReport, top_n: int = 12) -> str:
    """Plain-text rendering of a scan report."""
    market = report.market
    lines = [
        "=" * 72,
        "ALT SEASON SCANNER",
        "=" * 72,
        f"BTC dominance: {market.btc_dominance:.2f}%  |  phase: {report.phase.phase.value}",
        f"  {report.phase.description} - {report.phase.alt_strategy}",
        f"Market condition: {report.condition.label} - {report.condition.advice}",
    ]
    if market.fear_greed is not None:
        lines.append(f"Fear & greed: {market.fear_greed.value} ({market.fear_greed.classification})")
    if market.eth_btc_trend is not None:
        lines.append(f"ETH/BTC trend: {market.eth_btc_trend.value}")

    stats = report.stats
    lines += [
        "",
        f"Analyzed {stats.total_analyzed} coins, {stats.unique_candidates} candidates, "
        f"{stats.with_dex_data} with DEX data",
        f"Average score {stats.average_score:.1f}, {stats.above_threshold} above threshold",
    ]

    if report.sectors:
        lines += ["", "SECTORS", "-" * 72]
        for sector in report.sectors:
            lines.append(
                f"{sector.name:<16} avg {sector.average_score:5.1f}  coins {sector.coin_count:>2}  "
                f"hot {sector.hot_coins:>2}  top {sector.top_symbol} ({sector.top_score:.1f})"
            )

    for strategy, result in report.strategies.items():
        marker = " (recommended)" if result.is_recommended else ""
        lines += [
            "",
            f"{strategy.value}{marker}: {result.description}",
            f"  {result.total_candidates} candidates, {result.listed_candidates} ranked, "
            f"success rate {result.performance.success_rate:.0f}%",
            "-" * 72,
        ]
        for i, coin in enumerate(result.ranked[:top_n], 1):
            lines.append(_coin_line(i, coin))

    top = report.all_ranked()[:top_n]
    if top:
        lines += ["", "TOP OPPORTUNITIES", "-" * 72]
        for i, coin in enumerate(top, 1):
            lines.append(_coin_line(i, coin))
            for signal in coin.score.signals[:3]:
                lines.append(f"      - {signal}")

    if report.cross_strategy.insights:
        lines += ["", "CROSS-STRATEGY"]
        lines += [f"  {insight}" for insight in report.cross_strategy.insights]

    lines.append("=" * 72)
    return "\n".join(lines)


# ------------------------------------------------------------------
# Entry points
# ------------------------------------------------------------------

async def main():
    """Main entry point."""
    load_dotenv()
    config = _config_from_env()

    connector = CCXTConnector(config['exchange']['name'])
    api = MarketDataAPI(config['api'])
    history = DominanceHistory(config['history']['path'])
    collector = SnapshotCollector(api, connector, TTLCache(), config['collector'], history=history)
    scanner = MarketScanner(config['scanner'])

    try:
        report = await scanner.scan_market(collector)
        print(format_report(report, scanner.config['top_n']))
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.error(f"Scan failed: {e}")
        raise
    finally:
        await collector.close()


def cli():
    configure_logging()
    asyncio.run(main())


if __name__ == "__main__":
    cli()
