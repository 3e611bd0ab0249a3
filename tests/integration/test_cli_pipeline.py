"""Integration test: CLI end to end.

JSON trades file -> settings + logging bootstrap -> InsightsEngine ->
JSON report on stdout.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest
from click.testing import CliRunner

from trade_insights.cli import main


def _store_rows(n: int) -> list[dict]:
    """Trade rows shaped like the store's JSON API."""
    start = datetime(2024, 5, 6, 9, 30, tzinfo=timezone.utc)
    rows = []
    for i in range(n):
        entry = start + timedelta(days=i)
        pnl = 50.0 if i % 3 else -25.0
        rows.append({
            "id": i + 1,
            "symbol": "SPY",
            "type": "LONG",
            "entryPrice": 500,
            "exitPrice": 500 + pnl / 10,
            "quantity": 10,
            "stopLoss": 495,
            "entryDate": entry.isoformat(),
            "exitDate": (entry + timedelta(hours=3)).isoformat(),
            "profitLoss": pnl,
            "strategy": "opening range",
            "marketCondition": "Bullish",
        })
    return rows


@pytest.fixture
def trades_file(tmp_path):
    path = tmp_path / "trades.json"
    path.write_text(json.dumps({"trades": _store_rows(9)}))
    return path


def _invoke(*args):
    result = CliRunner().invoke(main, list(args), catch_exceptions=False)
    return result


class TestAnalyzeCommand:

    def test_report_on_stdout(self, trades_file):
        result = _invoke(
            "analyze", str(trades_file),
            "--as-of", "2024-06-30T00:00:00+00:00",
            "--log-level", "ERROR",
        )
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["data_status"] == "ok"
        assert report["summary"]["closed_trades"] == 9
        assert report["performance"]["winning_trades"] == 6
        assert report["behavior"]["discipline_score"] == 100.0
        assert report["patterns"]["by_market_condition"]["bullish"]["count"] == 9
        assert report["scorecard"]["reliability"] == "low"

    def test_config_file_applies(self, trades_file, tmp_path):
        config = tmp_path / "insights.toml"
        config.write_text("[engine]\nmin_trades = 50\n")
        result = _invoke(
            "analyze", str(trades_file),
            "--config", str(config),
            "--as-of", "2024-06-30T00:00:00+00:00",
            "--log-level", "ERROR",
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data_status"] == "insufficient_data"

    def test_missing_config_is_a_usage_error(self, trades_file, tmp_path):
        result = _invoke("analyze", str(trades_file), "--config", str(tmp_path / "nope.toml"))
        assert result.exit_code != 0
        assert "Config file not found" in result.output

    def test_bad_as_of(self, trades_file):
        result = _invoke("analyze", str(trades_file), "--as-of", "yesterday")
        assert result.exit_code != 0

    def test_rejects_non_array(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text(json.dumps({"rows": []}))
        result = _invoke("analyze", str(path))
        assert result.exit_code != 0


class TestSentimentCommand:

    def test_sentiment(self, trades_file):
        result = _invoke("sentiment", str(trades_file), "--as-of", "2024-06-30T00:00:00+00:00")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        # Every trade is long and two thirds won
        assert payload["sentiment"] == "neutral"
        assert payload["confidence"] == 70.0
