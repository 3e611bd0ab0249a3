"""Performance analyzer — risk / return metrics over closed trades.

Metrics are trade-level rather than time-normalised: each closed trade
is one observation in the return series, in chronological order.

Usage::

    window = build_window(trades, as_of=now)
    metrics = analyze_performance(window, EngineConfig())
    print(metrics.sharpe_ratio, metrics.max_drawdown_pct)
"""

from __future__ import annotations

import logging

from ..core.config import EngineConfig
from . import metrics as m
from .report import PerformanceMetrics
from .window import AnalysisWindow

logger = logging.getLogger(__name__)


def _profit_factor(gross_profit: float, gross_loss: float) -> tuple[float | None, bool]:
    """Return ``(value, unbounded)``; ``value`` is None when unbounded."""
    if gross_loss > 0:
        return m.round_metric(gross_profit / gross_loss), False
    if gross_profit > 0:
        return None, True
    return 0.0, False


def _consistency(mean: float, std: float) -> float:
    """100 minus the coefficient of variation (as a percent), floored at 0."""
    if std == 0:
        return 100.0
    if mean == 0:
        return 0.0
    return m.clamp_pct(100.0 - (std / abs(mean)) * 100.0)


def analyze_performance(
    window: AnalysisWindow, config: EngineConfig | None = None
) -> PerformanceMetrics:
    """Compute :class:`PerformanceMetrics` for the window.

    An empty window yields the all-zero default rather than an error.
    """
    config = config or EngineConfig()
    pnls = window.pnls
    n = len(pnls)
    if n == 0:
        return PerformanceMetrics()

    mean = m.mean(pnls)
    std = m.population_std(pnls)

    sharpe = 0.0
    if std > 0:
        sharpe = (mean - config.daily_risk_free_rate) / std

    max_dd, max_dd_pct = m.max_drawdown(pnls)
    total_return = float(sum(pnls))
    calmar = m.safe_ratio(total_return, max_dd_pct)

    split = m.split_outcomes(pnls)
    avg_win = split.avg_win
    avg_loss = split.avg_loss
    win_loss = m.safe_ratio(avg_win, avg_loss)
    profit_factor, unbounded = _profit_factor(split.gross_profit, split.gross_loss)

    win_rate = len(split.wins) / n
    expectancy = win_rate * avg_win - (1 - win_rate) * avg_loss

    logger.debug(
        "Performance: n=%d mean=%.4f std=%.4f max_dd=%.2f", n, mean, std, max_dd
    )

    return PerformanceMetrics(
        total_trades=n,
        winning_trades=len(split.wins),
        losing_trades=len(split.losses),
        breakeven_trades=split.breakevens,
        win_rate=m.round_metric(m.clamp_pct(win_rate * 100)),
        total_return=m.round_metric(total_return),
        gross_profit=m.round_metric(split.gross_profit),
        gross_loss=m.round_metric(split.gross_loss),
        avg_win=m.round_metric(avg_win),
        avg_loss=m.round_metric(avg_loss),
        sharpe_ratio=m.round_metric(sharpe),
        max_drawdown=m.round_metric(max_dd),
        max_drawdown_pct=m.round_metric(max_dd_pct),
        calmar_ratio=m.round_metric(calmar),
        win_loss_ratio=m.round_metric(win_loss),
        profit_factor=profit_factor,
        profit_factor_unbounded=unbounded,
        expectancy=m.round_metric(expectancy),
        consistency=m.round_metric(_consistency(mean, std)),
        volatility=m.round_metric(std),
    )
