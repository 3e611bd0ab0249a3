"""Predictive insight generator.

Consumes the outputs of the performance, behavioral and pattern stages
(never recomputing them) plus the most recent slice of the window, and
derives forward-looking guidance: next-trade success probability, a
Kelly-criterion position size, strategies worth focusing on, risk
warnings and a one-word outlook.

Nothing here is a trained model; every output is a deterministic
heuristic over historical results.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from ..core.config import EngineConfig
from ..core.enums import MarketOutlook
from . import metrics as m
from .report import BehavioralMetrics, PatternSet, PerformanceMetrics, PredictiveInsights
from .window import AnalysisWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _WarningInputs:
    performance: PerformanceMetrics
    behavior: BehavioralMetrics
    recent_win_rate: float  # Fraction
    config: EngineConfig


@dataclass(frozen=True)
class RiskWarningRule:
    """One independent risk-warning trigger."""

    name: str
    condition: Callable[[_WarningInputs], bool]
    message: Callable[[_WarningInputs], str]


# -------------------------------------------------
# Risk warning rule table
# -------------------------------------------------
# Every rule whose condition holds emits its message;
# rules never short-circuit each other.
# -------------------------------------------------

RISK_WARNING_RULES: tuple[RiskWarningRule, ...] = (
    RiskWarningRule(
        name="HIGH_DRAWDOWN",
        condition=lambda w: w.performance.max_drawdown_pct > w.config.drawdown_warning_pct,
        message=lambda w: (
            f"High drawdown detected ({w.performance.max_drawdown_pct:.1f}%) - "
            "consider reducing position sizes"
        ),
    ),
    RiskWarningRule(
        name="RECENT_PERFORMANCE_DECLINE",
        condition=lambda w: w.recent_win_rate < w.config.recent_win_rate_warning,
        message=lambda w: (
            f"Recent win rate is {w.recent_win_rate * 100:.0f}% - "
            "take a break or review your strategy"
        ),
    ),
    RiskWarningRule(
        name="OVERTRADING",
        condition=lambda w: w.behavior.overtrading_risk >= w.config.behavior_warning_score,
        message=lambda w: (
            f"Trading frequency is high ({w.behavior.trades_per_day:.1f} trades/day) - "
            "be selective and wait for your setups"
        ),
    ),
    RiskWarningRule(
        name="REVENGE_TRADING",
        condition=lambda w: w.behavior.revenge_trading_risk >= w.config.behavior_warning_score,
        message=lambda w: (
            "Larger positions opened shortly after losses - "
            "pause after a loss before sizing up"
        ),
    ),
)


def momentum_multiplier(recent_win_rate: float, config: EngineConfig) -> float:
    if recent_win_rate > config.momentum_high:
        return 1.1
    if recent_win_rate < config.momentum_low:
        return 0.9
    return 1.0


def market_outlook(recent_win_rate: float, config: EngineConfig) -> MarketOutlook:
    if recent_win_rate > config.momentum_high:
        return MarketOutlook.POSITIVE
    if recent_win_rate < config.momentum_low:
        return MarketOutlook.CAUTIOUS
    return MarketOutlook.NEUTRAL


def kelly_fraction(win_rate: float, avg_win: float, avg_loss: float) -> float:
    """Kelly criterion ``f* = (p*b - q) / b`` with ``b = avg_win / avg_loss``.

    Without any winning trade there is no edge to size (-1.0, i.e. "bet
    nothing").  Without any losing trade ``b`` is unbounded and the
    formula converges to ``p``.
    """
    if avg_win <= 0:
        return -1.0
    if avg_loss <= 0:
        return win_rate
    # Same as (p*b - q) / b, without dividing by a b that underflowed to 0
    loss_per_win = avg_loss / avg_win
    q = 1.0 - win_rate
    if q <= 0:
        return win_rate
    if not math.isfinite(loss_per_win):
        return -1.0
    return win_rate - q * loss_per_win


def optimal_position_size(fraction: float, config: EngineConfig) -> float:
    """Kelly fraction clamped to the configured floor/cap, as a percent."""
    return m.clamp(fraction, config.kelly_floor, config.kelly_cap) * 100


def suggest_strategies(patterns: PatternSet, config: EngineConfig) -> list[str]:
    """Eligible strategies ranked by win rate, best first."""
    eligible = [g for g in patterns.by_strategy if g.eligible]
    # sorted() is stable, so equal win rates keep first-seen order
    ranked = sorted(eligible, key=lambda g: g.win_rate, reverse=True)
    return [g.key for g in ranked[: config.max_suggestions]]


def generate_predictions(
    window: AnalysisWindow,
    performance: PerformanceMetrics,
    behavior: BehavioralMetrics,
    patterns: PatternSet,
    config: EngineConfig | None = None,
) -> PredictiveInsights:
    """Derive :class:`PredictiveInsights` from the earlier stages."""
    config = config or EngineConfig()

    recent = window.recent(config.recency_window)
    recent_wr = m.win_rate([t.profit_loss for t in recent]) if recent else 0.5

    # Raw outcomes, not the rounded display values in `performance`
    pnls = window.pnls
    split = m.split_outcomes(pnls)
    base_wr = len(split.wins) / len(pnls) if pnls else 0.5

    success = m.clamp(base_wr * 100 * momentum_multiplier(recent_wr, config), 5.0, 95.0)

    fraction = kelly_fraction(base_wr, split.avg_win, split.avg_loss)

    inputs = _WarningInputs(
        performance=performance,
        behavior=behavior,
        recent_win_rate=recent_wr,
        config=config,
    )
    warnings = [rule.message(inputs) for rule in RISK_WARNING_RULES if rule.condition(inputs)]
    if warnings:
        logger.info("Risk warnings raised: %d", len(warnings))

    return PredictiveInsights(
        next_trade_success_pct=m.round_metric(success),
        optimal_position_size_pct=m.round_metric(optimal_position_size(fraction, config)),
        kelly_fraction=m.round_metric(fraction, 4),
        recent_win_rate=m.round_metric(recent_wr * 100),
        suggested_strategies=suggest_strategies(patterns, config),
        risk_warnings=warnings,
        market_outlook=market_outlook(recent_wr, config),
    )
