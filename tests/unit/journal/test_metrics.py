"""Tests for the metric primitives."""

import math

import pytest

from trade_insights.journal import metrics as m


class TestBasicStats:

    def test_empty_sequences_are_zero(self):
        assert m.mean([]) == 0.0
        assert m.variance([]) == 0.0
        assert m.population_std([]) == 0.0
        assert m.win_rate([]) == 0.0

    def test_population_variance(self):
        # mean 2, deviations 1, 0, 1 → 2/3
        assert m.variance([1.0, 2.0, 3.0]) == pytest.approx(2 / 3)

    def test_identical_values_have_exactly_zero_std(self):
        assert m.population_std([0.1, 0.1, 0.1]) == 0.0

    def test_returns_plain_floats(self):
        assert type(m.mean([1, 2, 3])) is float
        assert type(m.population_std([1, 2, 3])) is float


class TestSafeRatio:

    def test_zero_denominator_uses_default(self):
        assert m.safe_ratio(5.0, 0.0) == 0.0
        assert m.safe_ratio(5.0, 0.0, default=-1.0) == -1.0

    def test_normal_division(self):
        assert m.safe_ratio(6.0, 3.0) == 2.0


class TestRounding:

    def test_non_finite_collapses_to_default(self):
        assert m.round_metric(float("inf")) == 0.0
        assert m.round_metric(float("nan"), default=1.0) == 1.0

    def test_negative_zero_normalised(self):
        result = m.round_metric(-0.001)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0

    def test_clamp_pct(self):
        assert m.clamp_pct(150.0) == 100.0
        assert m.clamp_pct(-5.0) == 0.0


class TestOutcomeSplit:

    def test_partition(self):
        split = m.split_outcomes([100.0, -50.0, 0.0, 100.0])
        assert len(split.wins) == 2
        assert len(split.losses) == 1
        assert split.breakevens == 1
        assert split.gross_profit == 200.0
        assert split.gross_loss == 50.0
        assert split.avg_win == 100.0
        assert split.avg_loss == 50.0

    def test_empty_subsets_average_zero(self):
        split = m.split_outcomes([10.0])
        assert split.avg_loss == 0.0


class TestDrawdown:

    def test_empty(self):
        assert m.max_drawdown([]) == (0.0, 0.0)

    def test_first_trade_loss_is_full_drawdown(self):
        assert m.max_drawdown([-100.0]) == (100.0, 100.0)

    def test_drawdown_from_peak(self):
        # Equity 100 → 200 → 150: drawdown 50 from a 200 peak
        dd, pct = m.max_drawdown([100.0, 100.0, -50.0])
        assert dd == 50.0
        assert pct == pytest.approx(25.0)

    def test_recovery_does_not_reduce_max(self):
        dd, _ = m.max_drawdown([100.0, -80.0, 500.0])
        assert dd == 80.0

    def test_pct_is_clamped(self):
        # Peak 100, then equity -200: 300% decline clamps to 100
        _, pct = m.max_drawdown([100.0, -300.0])
        assert pct == 100.0

    def test_drawdown_curve_tracks_peak(self):
        drawdowns, peaks = m.drawdown_curve([50.0, -20.0, 40.0])
        assert list(peaks) == [50.0, 50.0, 70.0]
        assert list(drawdowns) == [0.0, 20.0, 0.0]
