"""Unit tests for environment configuration and report rendering."""

from alt_scanner.core.enums import Strategy
from alt_scanner.main import _config_from_env, format_report
from alt_scanner.scanner.market_scanner import MarketScanner

ENV_VARS = (
    "COINGECKO_API_KEY", "COINGECKO_BASE_URL", "EXCHANGE_NAME",
    "SCANNER_TOP_COINS", "SCANNER_BATCH_DELAY", "SCANNER_TOP_N", "SCANNER_STRATEGIES",
    "DOMINANCE_HISTORY_FILE",
)


class TestConfigFromEnv:
    def test_defaults(self, monkeypatch):
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)

        config = _config_from_env()

        assert config["exchange"]["name"] == "binance"
        assert config["api"]["coingecko_api_key"] is None
        assert config["collector"] == {}
        assert config["scanner"] == {}
        assert config["history"]["path"].endswith("btc-dominance-history.json")

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("COINGECKO_API_KEY", " demo-key ")
        monkeypatch.setenv("EXCHANGE_NAME", "bybit")
        monkeypatch.setenv("SCANNER_TOP_COINS", "150")
        monkeypatch.setenv("SCANNER_BATCH_DELAY", "0.5")
        monkeypatch.setenv("SCANNER_TOP_N", "5")
        monkeypatch.setenv("SCANNER_STRATEGIES", "momentum, value")
        monkeypatch.setenv("DOMINANCE_HISTORY_FILE", "/tmp/dominance.json")

        config = _config_from_env()

        assert config["api"]["coingecko_api_key"] == "demo-key"
        assert config["exchange"]["name"] == "bybit"
        assert config["collector"] == {"top_coins_limit": 150, "batch_delay": 0.5}
        assert config["scanner"]["top_n"] == 5
        assert config["scanner"]["strategies"] == [Strategy.MOMENTUM, Strategy.VALUE]
        assert config["history"]["path"] == "/tmp/dominance.json"


class TestFormatReport:
    def test_renders_sections(self, make_snapshot, alt_season_market):
        scanner = MarketScanner()
        report = scanner.scan([make_snapshot(), make_snapshot(symbol="OP", name="Optimism")], alt_season_market)

        text = format_report(report, top_n=3)

        assert "BTC dominance: 44.00%" in text
        assert "Fear & greed: 30 (Fear)" in text
        assert "SECTORS" in text
        assert "TOP OPPORTUNITIES" in text
        assert " ARB " in text
