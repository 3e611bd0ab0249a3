"""Tests for the insights engine façade."""

from datetime import datetime, timedelta, timezone

import pytest

from trade_insights.core.config import EngineConfig
from trade_insights.core.enums import DataStatus, Reliability, WarningCode
from trade_insights.core.errors import InvalidInputError
from trade_insights.journal.engine import InsightsEngine
from trade_insights.journal.similarity import ProposedTrade


class TestInsufficientData:

    def test_below_minimum(self, engine, journal_trades, as_of):
        report = engine.analyze(journal_trades[:2], as_of=as_of)
        assert report.data_status == DataStatus.INSUFFICIENT_DATA
        assert report.performance.insufficient_data
        assert report.behavior.insufficient_data
        assert report.patterns.insufficient_data
        assert report.predictions.insufficient_data
        assert report.scorecard.insufficient_data
        assert report.scorecard.priority_actions == ()
        assert list(report.coaching.personalized_tips) == [
            "Log at least 3 closed trades to unlock insights (2 so far)"
        ]

    def test_empty_journal(self, engine, as_of):
        report = engine.analyze([], as_of=as_of)
        assert report.data_status == DataStatus.INSUFFICIENT_DATA
        assert report.summary.closed_trades == 0
        assert report.predictions.next_trade_success_pct == 50.0

    def test_threshold_is_configurable(self, journal_trades, as_of):
        engine = InsightsEngine(EngineConfig(min_trades=20))
        report = engine.analyze(journal_trades, as_of=as_of)
        assert report.data_status == DataStatus.INSUFFICIENT_DATA


class TestFullReport:

    def test_sections_populated(self, engine, journal_trades, as_of):
        report = engine.analyze(journal_trades, as_of=as_of)
        assert report.data_status == DataStatus.OK
        assert report.summary.input_records == 13
        assert report.summary.closed_trades == 12
        assert report.summary.open_trades == 1
        assert report.performance.total_trades == 12
        assert report.performance.winning_trades == 8
        assert report.performance.win_rate == 66.67
        assert report.performance.total_return == 555.0
        assert {g.key for g in report.patterns.by_strategy} == {"breakout", "pullback"}
        assert report.coaching.mental_game_advice

    def test_malformed_records_reported(self, engine, journal_trades, as_of):
        broken = {"id": "bad", "entry_price": 10, "quantity": 1,
                  "entry_timestamp": "2024-03-01T10:00:00Z", "profit_loss": 5}
        report = engine.analyze(journal_trades + [broken], as_of=as_of)
        assert report.data_status == DataStatus.OK
        assert report.summary.excluded_records == 1
        assert report.warnings[0].code == WarningCode.PNL_WITHOUT_EXIT
        assert report.warnings[0].trade_id == "bad"

    def test_as_of_cuts_the_journal(self, engine, journal_trades, base_time):
        report = engine.analyze(journal_trades, as_of=base_time + timedelta(days=5))
        assert report.performance.total_trades == 5
        assert len(report.warnings) == 7

    def test_scorecard_populated(self, engine, journal_trades, as_of):
        scorecard = engine.analyze(journal_trades, as_of=as_of).scorecard
        assert not scorecard.insufficient_data
        assert 0 <= scorecard.grade.score <= 100
        assert scorecard.reliability == Reliability.MEDIUM
        assert [s.setup for s in scorecard.top_setups] == ["retest", "flag"]
        assert scorecard.top_setups[0].total_pnl == 385.0
        # Journal ends in January; as_of is December
        assert scorecard.monthly_performance == ()

    def test_report_sequences_are_immutable(self, engine, journal_trades, as_of):
        report = engine.analyze(journal_trades, as_of=as_of)
        assert isinstance(report.coaching.strengths, tuple)
        assert isinstance(report.patterns.by_strategy, tuple)
        assert isinstance(report.scorecard.priority_actions, tuple)
        with pytest.raises(AttributeError):
            report.predictions.risk_warnings.append("extra")

    def test_json_has_no_infinities(self, engine, journal_trades, as_of):
        payload = engine.analyze(journal_trades, as_of=as_of).to_json()
        assert "Infinity" not in payload
        assert "NaN" not in payload


class TestContract:

    def test_none_trades(self, engine, as_of):
        with pytest.raises(InvalidInputError):
            engine.analyze(None, as_of=as_of)

    def test_as_of_required(self, engine, journal_trades):
        with pytest.raises(InvalidInputError):
            engine.analyze(journal_trades, as_of="2024-12-31")

    def test_default_config(self):
        assert InsightsEngine().config == EngineConfig()


class TestExecutionModes:

    def test_parallel_matches_serial(self, journal_trades, as_of):
        serial = InsightsEngine(EngineConfig()).analyze(journal_trades, as_of=as_of)
        parallel = InsightsEngine(EngineConfig(parallel=True)).analyze(journal_trades, as_of=as_of)
        assert parallel == serial

    @pytest.mark.asyncio
    async def test_async_matches_sync(self, engine, journal_trades, as_of):
        expected = engine.analyze(journal_trades, as_of=as_of)
        result = await engine.analyze_async(journal_trades, as_of=as_of)
        assert result == expected

    @pytest.mark.asyncio
    async def test_async_insufficient(self, engine, as_of):
        result = await engine.analyze_async([], as_of=as_of)
        assert result.data_status == DataStatus.INSUFFICIENT_DATA


class TestPredictTrade:

    def test_uses_closed_trades(self, engine, journal_trades, as_of):
        proposal = ProposedTrade(symbol="AAPL", strategy="breakout")
        outlook = engine.predict_trade(journal_trades, proposal, as_of=as_of)
        # Every AAPL trade in the fixture is a breakout trade, 4 of 6 won
        assert outlook.similar_trades == 6
        assert outlook.win_probability == 66.67

    def test_naive_as_of_accepted(self, engine, journal_trades):
        outlook = engine.predict_trade(
            journal_trades, ProposedTrade(symbol="MSFT"), as_of=datetime(2030, 1, 1)
        )
        assert outlook.similar_trades == 0
        assert outlook.confidence == 0.3
