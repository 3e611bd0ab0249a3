"""Tests for the predictive insight generator."""

from datetime import timedelta

import pytest

from trade_insights.core.config import EngineConfig
from trade_insights.core.enums import MarketOutlook
from trade_insights.journal.behavioral import analyze_behavior
from trade_insights.journal.patterns import recognize_patterns
from trade_insights.journal.performance import analyze_performance
from trade_insights.journal.predictive import (
    RISK_WARNING_RULES,
    generate_predictions,
    kelly_fraction,
    optimal_position_size,
)
from trade_insights.journal.report import BehavioralMetrics, PerformanceMetrics

from .conftest import T0, make_series, make_trade, window_of


def _predict(trades, config=None):
    config = config or EngineConfig()
    window = window_of(trades)
    return generate_predictions(
        window,
        analyze_performance(window, config),
        analyze_behavior(window, config),
        recognize_patterns(window, config),
        config,
    )


class TestKelly:

    def test_formula(self):
        # p=0.6, b=2 → (1.2 - 0.4) / 2 = 0.4
        assert kelly_fraction(0.6, 200.0, 100.0) == pytest.approx(0.4)

    def test_no_wins_bets_nothing(self):
        assert kelly_fraction(0.0, 0.0, 50.0) < 0

    def test_no_losses_converges_to_win_rate(self):
        assert kelly_fraction(1.0, 100.0, 0.0) == 1.0

    @pytest.mark.parametrize("fraction", [-5.0, -0.2, 0.0, 0.005, 0.1, 0.9, 3.0])
    def test_size_always_within_bounds(self, fraction):
        size = optimal_position_size(fraction, EngineConfig())
        assert 1.0 <= size <= 25.0

    def test_perfect_record_hits_cap(self):
        insights = _predict(make_series([100.0] * 10))
        assert insights.optimal_position_size_pct == 25.0

    def test_underflowing_payoff_ratio(self):
        # avg_win / avg_loss underflows to 0.0
        assert kelly_fraction(0.0, 5e-324, 2.0) == -1.0
        assert kelly_fraction(0.5, 5e-324, 2.0) == -1.0

    def test_sub_cent_results_use_unrounded_averages(self):
        # p=2/3, b=4 -> f*=0.583, capped at 25%
        insights = _predict(make_series([0.004, 0.004, -0.001]))
        assert insights.kelly_fraction == pytest.approx(0.5833, abs=1e-4)
        assert insights.optimal_position_size_pct == 25.0


class TestSuccessProbability:

    def test_momentum_boost(self):
        # 7/10 overall and recent → 70 * 1.1
        insights = _predict(make_series([10.0] * 7 + [-10.0] * 3))
        assert insights.next_trade_success_pct == 77.0
        assert insights.market_outlook == MarketOutlook.POSITIVE

    def test_momentum_drag(self):
        insights = _predict(make_series([10.0] * 3 + [-10.0] * 7))
        assert insights.next_trade_success_pct == 27.0
        assert insights.market_outlook == MarketOutlook.CAUTIOUS

    def test_neutral(self):
        insights = _predict(make_series([10.0, -10.0] * 5))
        assert insights.next_trade_success_pct == 50.0
        assert insights.market_outlook == MarketOutlook.NEUTRAL

    def test_clamped(self):
        assert _predict(make_series([10.0] * 5)).next_trade_success_pct == 95.0
        assert _predict(make_series([-10.0] * 5)).next_trade_success_pct == 5.0

    def test_recent_window_only_uses_last_trades(self):
        # Old wins, recent losses
        config = EngineConfig(recency_window=5)
        insights = _predict(make_series([10.0] * 10 + [-10.0] * 5), config)
        assert insights.recent_win_rate == 0.0
        assert insights.market_outlook == MarketOutlook.CAUTIOUS


class TestSuggestedStrategies:

    def test_ranked_and_thresholded(self):
        trades = []
        layout = [("alpha", 10.0), ("alpha", -10.0), ("beta", 10.0), ("beta", 10.0), ("gamma", 10.0)]
        for i, (strategy, pnl) in enumerate(layout):
            trades.append(make_trade(pnl, entry_time=T0 + timedelta(days=i), strategy=strategy))
        assert list(_predict(trades).suggested_strategies) == ["beta", "alpha"]

    def test_limited(self):
        trades = []
        for i, strategy in enumerate("abcde"):
            for j in range(2):
                trades.append(
                    make_trade(10.0, entry_time=T0 + timedelta(days=i * 2 + j), strategy=strategy)
                )
        assert len(_predict(trades).suggested_strategies) == 3


class TestRiskWarnings:

    def test_none_for_healthy_record(self):
        assert list(_predict(make_series([10.0, 12.0, -2.0, 15.0])).risk_warnings) == []

    def test_all_applicable_rules_fire(self):
        # Deep drawdown and a losing recent run together
        insights = _predict(make_series([100.0, -90.0, -5.0, -5.0, -5.0]))
        assert len(insights.risk_warnings) == 2
        assert any("drawdown" in w for w in insights.risk_warnings)
        assert any("Recent win rate" in w for w in insights.risk_warnings)

    def test_behavior_rules(self):
        trades = make_series([10.0, -5.0] * 6, spacing=timedelta(minutes=30))
        insights = _predict(trades)
        assert any("frequency" in w for w in insights.risk_warnings)

    def test_rule_names_unique(self):
        names = [r.name for r in RISK_WARNING_RULES]
        assert len(names) == len(set(names))


class TestEmptyInputs:

    def test_neutral_defaults(self, empty_window, config):
        insights = generate_predictions(
            empty_window,
            PerformanceMetrics(),
            BehavioralMetrics(),
            recognize_patterns(empty_window, config),
            config,
        )
        assert insights.next_trade_success_pct == 50.0
        assert insights.optimal_position_size_pct == 1.0
        assert insights.market_outlook == MarketOutlook.NEUTRAL
        assert list(insights.risk_warnings) == []
