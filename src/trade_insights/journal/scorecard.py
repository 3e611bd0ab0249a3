"""Performance scorecard — summary verdicts over a finished analysis.

Reduces the performance and behaviour sections into the quick answers a
dashboard needs: an overall letter grade, a drawdown risk level, trend
flags, an emotional-state label and a short list of priority actions.
Two breakdowns (top setups, the last six calendar months) read the
window directly.

Grades and verdicts read the reported (rounded) metrics, so anyone can
reproduce them from the JSON report alone.

Composite grade weights::

    Component            Weight   Component score (0-100)
    ──────────────────────────────────────────────────────────
    Sharpe ratio         0.25     (sharpe + 2) * 25
    Profit factor        0.20     (pf - 0.5) * 50, 100 if unbounded
    Consistency          0.20     as reported
    Max drawdown         0.15     100 - 2 * drawdown %
    Win/loss ratio       0.10     ratio * 50
    Discipline           0.08     as reported
    Overtrading          0.06     100 - risk
    Revenge trading      0.06     100 - risk
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from ..core.enums import (
    EmotionalStateLabel,
    Grade,
    Priority,
    Reliability,
    RiskLevel,
)
from . import metrics as m
from .patterns import UNKNOWN_SETUP
from .report import (
    BehavioralMetrics,
    EmotionalState,
    MonthlyPerformance,
    PerformanceGrade,
    PerformanceMetrics,
    PriorityAction,
    Scorecard,
    SetupPerformance,
    TrendFlags,
)
from .window import AnalysisWindow

logger = logging.getLogger(__name__)

MAX_PRIORITY_ACTIONS = 5
TOP_SETUPS = 5
MIN_SETUP_TRADES = 3
MONTHS_BACK = 6


# ================================================================== #
# Composite grade                                                     #
# ================================================================== #

GRADE_WEIGHTS: dict[str, float] = {
    "sharpe_ratio": 0.25,
    "profit_factor": 0.20,
    "consistency": 0.20,
    "max_drawdown": 0.15,
    "win_loss_ratio": 0.10,
    "discipline": 0.08,
    "overtrading": 0.06,
    "revenge_trading": 0.06,
}

# (minimum score, grade, description), best first
_GRADE_BANDS: tuple[tuple[int, Grade, str], ...] = (
    (90, Grade.A_PLUS, "Exceptional Performance"),
    (80, Grade.A, "Excellent Performance"),
    (70, Grade.B_PLUS, "Good Performance"),
    (60, Grade.B, "Above Average"),
    (50, Grade.C_PLUS, "Average Performance"),
    (40, Grade.C, "Below Average"),
)


def _profit_factor_score(performance: PerformanceMetrics) -> float:
    if performance.profit_factor_unbounded:
        return 100.0
    return m.clamp_pct(((performance.profit_factor or 0.0) - 0.5) * 50)


def component_scores(
    performance: PerformanceMetrics, behavior: BehavioralMetrics
) -> dict[str, float]:
    """Per-component 0-100 scores, keyed like :data:`GRADE_WEIGHTS`."""
    return {
        "sharpe_ratio": m.clamp_pct((performance.sharpe_ratio + 2) * 25),
        "profit_factor": _profit_factor_score(performance),
        "consistency": performance.consistency,
        "max_drawdown": m.clamp_pct(100 - performance.max_drawdown_pct * 2),
        "win_loss_ratio": m.clamp_pct(performance.win_loss_ratio * 50),
        "discipline": behavior.discipline_score,
        "overtrading": 100 - behavior.overtrading_risk,
        "revenge_trading": 100 - behavior.revenge_trading_risk,
    }


def performance_grade(
    performance: PerformanceMetrics, behavior: BehavioralMetrics
) -> PerformanceGrade:
    scores = component_scores(performance, behavior)
    weighted = sum(scores[k] * w for k, w in GRADE_WEIGHTS.items())
    # Half-up rounding; round() would send 84.5 to 84
    score = int(math.floor(weighted + 0.5))

    for minimum, grade, description in _GRADE_BANDS:
        if score >= minimum:
            return PerformanceGrade(grade=grade, score=score, description=description)
    return PerformanceGrade(grade=Grade.D, score=score, description="Needs Improvement")


# ================================================================== #
# Priority actions                                                    #
# ================================================================== #

@dataclass(frozen=True)
class ActionRule:
    priority: Priority
    condition: Callable[[PerformanceMetrics, BehavioralMetrics], bool]
    action: str
    impact: str
    reason: str | Callable[[PerformanceMetrics, BehavioralMetrics], str]

    def build(self, p: PerformanceMetrics, b: BehavioralMetrics) -> PriorityAction:
        reason = self.reason(p, b) if callable(self.reason) else self.reason
        return PriorityAction(
            priority=self.priority, action=self.action, reason=reason, impact=self.impact
        )


def _low_profit_factor(p: PerformanceMetrics, b: BehavioralMetrics) -> bool:
    return not p.profit_factor_unbounded and (p.profit_factor or 0.0) < 1.1


# Evaluated in order, most urgent first; only the first
# MAX_PRIORITY_ACTIONS matches are kept.
PRIORITY_ACTION_RULES: tuple[ActionRule, ...] = (
    ActionRule(
        Priority.CRITICAL,
        lambda p, b: p.max_drawdown_pct > 25,
        "Reduce position sizes immediately",
        "Risk Management",
        lambda p, b: f"Max drawdown of {p.max_drawdown_pct:.1f}% is dangerously high",
    ),
    ActionRule(
        Priority.HIGH,
        lambda p, b: b.overconfidence_score > 30,
        "Implement position size limits",
        "Behavioral Control",
        "Overconfidence is leading to oversized positions",
    ),
    ActionRule(
        Priority.HIGH,
        _low_profit_factor,
        "Review exit strategy",
        "Strategy Optimization",
        "Low profit factor indicates losses are eating into profits",
    ),
    ActionRule(
        Priority.HIGH,
        lambda p, b: b.overtrading_risk > 40,
        "Reduce trade frequency",
        "Behavioral Control",
        lambda p, b: f"Overtrading detected - {b.trades_per_day:.1f} trades per day",
    ),
    ActionRule(
        Priority.HIGH,
        lambda p, b: b.revenge_trading_risk > 20,
        "Avoid revenge trading",
        "Emotional Control",
        "Taking larger positions immediately after a loss increases risk",
    ),
    ActionRule(
        Priority.MEDIUM,
        lambda p, b: b.discipline_score < 70,
        "Improve stop loss discipline",
        "Risk Management",
        "Inconsistent risk management detected",
    ),
    ActionRule(
        Priority.MEDIUM,
        lambda p, b: p.consistency < 60,
        "Focus on consistent strategy execution",
        "Strategy Development",
        "Performance volatility is too high",
    ),
)


def priority_actions(
    performance: PerformanceMetrics,
    behavior: BehavioralMetrics,
    rules: tuple[ActionRule, ...] = PRIORITY_ACTION_RULES,
) -> list[PriorityAction]:
    matched = [r.build(performance, behavior) for r in rules if r.condition(performance, behavior)]
    return matched[:MAX_PRIORITY_ACTIONS]


# ================================================================== #
# Verdicts                                                            #
# ================================================================== #

def risk_level(performance: PerformanceMetrics) -> RiskLevel:
    if performance.max_drawdown_pct > 20:
        return RiskLevel.HIGH
    if performance.max_drawdown_pct > 10:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def trend_flags(performance: PerformanceMetrics) -> TrendFlags:
    wr = performance.win_rate
    return TrendFlags(
        improving=wr > 50 and performance.consistency > 60,
        declining=wr < 40 or performance.max_drawdown_pct > 25,
        stable=40 <= wr <= 60 and performance.consistency > 40,
    )


def emotional_state(behavior: BehavioralMetrics) -> EmotionalState:
    if behavior.overconfidence_score > 25 and behavior.fear_greed_index > 70:
        return EmotionalState(
            state=EmotionalStateLabel.EUPHORIC,
            description="High overconfidence combined with emotional trading",
            recommendation="Take a break and reassess your approach",
        )
    if behavior.discipline_score > 80 and behavior.overconfidence_score < 15:
        return EmotionalState(
            state=EmotionalStateLabel.DISCIPLINED,
            description="Excellent emotional control and discipline",
            recommendation="Maintain current mental approach",
        )
    if behavior.fear_greed_index > 60:
        return EmotionalState(
            state=EmotionalStateLabel.EMOTIONAL,
            description="Fear and greed are influencing decisions",
            recommendation="Practice mindfulness and systematic decision making",
        )
    return EmotionalState()


def analysis_reliability(closed_trades: int) -> Reliability:
    if closed_trades >= 20:
        return Reliability.HIGH
    if closed_trades >= 10:
        return Reliability.MEDIUM
    return Reliability.LOW


# ================================================================== #
# Window breakdowns                                                   #
# ================================================================== #

def top_setups(window: AnalysisWindow) -> list[SetupPerformance]:
    """Setups with at least three trades, by total P&L, best first."""
    groups: dict[str, list[float]] = defaultdict(list)
    for t in window.trades:
        label = (t.setup_description or "").strip() or UNKNOWN_SETUP
        groups[label].append(float(t.profit_loss))  # type: ignore[arg-type]

    eligible = [(k, v) for k, v in groups.items() if len(v) >= MIN_SETUP_TRADES]
    # sorted() is stable: equal totals keep first-seen order
    ranked = sorted(eligible, key=lambda kv: sum(kv[1]), reverse=True)
    return [
        SetupPerformance(
            setup=label,
            trades=len(pnls),
            total_pnl=m.round_metric(sum(pnls)),
            avg_pnl=m.round_metric(m.mean(pnls)),
            win_rate=m.round_metric(m.win_rate(pnls) * 100),
        )
        for label, pnls in ranked[:TOP_SETUPS]
    ]


def _shift_month(year: int, month: int, back: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) - back
    return index // 12, index % 12 + 1


def monthly_performance(
    window: AnalysisWindow, months: int = MONTHS_BACK
) -> list[MonthlyPerformance]:
    """Per calendar month (UTC) for the *months* months ending at ``as_of``.

    Months without trades are omitted.  Oldest first.
    """
    as_of = window.as_of.astimezone(timezone.utc) if window.as_of.tzinfo else window.as_of
    wanted = [_shift_month(as_of.year, as_of.month, back) for back in range(months - 1, -1, -1)]

    buckets: dict[tuple[int, int], list[float]] = defaultdict(list)
    for t in window.trades:
        entry: datetime = t.entry_timestamp.astimezone(timezone.utc)
        buckets[(entry.year, entry.month)].append(float(t.profit_loss))  # type: ignore[arg-type]

    return [
        MonthlyPerformance(
            month=f"{year:04d}-{month:02d}",
            trades=len(buckets[(year, month)]),
            pnl=m.round_metric(sum(buckets[(year, month)])),
            win_rate=m.round_metric(m.win_rate(buckets[(year, month)]) * 100),
        )
        for year, month in wanted
        if buckets.get((year, month))
    ]


def build_scorecard(
    window: AnalysisWindow,
    performance: PerformanceMetrics,
    behavior: BehavioralMetrics,
) -> Scorecard:
    """Assemble the :class:`Scorecard` for a full (non-degenerate) analysis."""
    grade = performance_grade(performance, behavior)
    actions = priority_actions(performance, behavior)

    logger.debug(
        "Scorecard: grade=%s score=%d actions=%d",
        grade.grade.value,
        grade.score,
        len(actions),
    )

    return Scorecard(
        grade=grade,
        risk_level=risk_level(performance),
        trends=trend_flags(performance),
        emotional_state=emotional_state(behavior),
        priority_actions=actions,
        top_setups=top_setups(window),
        monthly_performance=monthly_performance(window),
        reliability=analysis_reliability(len(window)),
    )
