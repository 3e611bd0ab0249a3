"""Coaching recommendation generator — metric thresholds to advice."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from .report import (
    BehavioralMetrics,
    CoachingNotes,
    PatternSet,
    PerformanceMetrics,
    PredictiveInsights,
)

Section = Literal[
    "strengths",
    "weaknesses",
    "improvement_areas",
    "personalized_tips",
    "mental_game_advice",
]


@dataclass(frozen=True)
class CoachingContext:
    """Everything a coaching rule may look at."""

    performance: PerformanceMetrics
    behavior: BehavioralMetrics
    patterns: PatternSet
    predictions: PredictiveInsights | None = None


@dataclass(frozen=True)
class CoachingRule:
    section: Section
    condition: Callable[[CoachingContext], bool]
    message: str | Callable[[CoachingContext], str]

    def render(self, ctx: CoachingContext) -> str:
        if callable(self.message):
            return self.message(ctx)
        return self.message


def _bounded_profit_factor_below(threshold: float) -> Callable[[CoachingContext], bool]:
    def check(ctx: CoachingContext) -> bool:
        pf = ctx.performance.profit_factor
        return not ctx.performance.profit_factor_unbounded and pf is not None and pf < threshold

    return check


def _best_hour_tip(ctx: CoachingContext) -> str:
    return (
        f"Your best trading hour is {ctx.patterns.best_hour:02d}:00 - "
        "focus your energy then"
    )


def _best_setup_tip(ctx: CoachingContext) -> str:
    setup = ctx.patterns.setup(ctx.patterns.best_setup or "")
    win_rate = setup.win_rate if setup else 0.0
    return (
        f'Your "{ctx.patterns.best_setup}" setup has a {win_rate:.1f}% win rate - '
        "use it more"
    )


def _has_proven_setup(ctx: CoachingContext) -> bool:
    if ctx.patterns.best_setup is None:
        return False
    setup = ctx.patterns.setup(ctx.patterns.best_setup)
    return setup is not None and setup.count >= 3


# -------------------------------------------------
# Coaching rule table
# -------------------------------------------------
# Each rule maps a metric threshold to one message
# in one section.  Rules are evaluated in order and
# independently; add a rule by appending a row.
# -------------------------------------------------

COACHING_RULES: tuple[CoachingRule, ...] = (
    # Strengths
    CoachingRule("strengths", lambda c: c.performance.win_loss_ratio > 1.5,
                 "Excellent risk-reward management"),
    CoachingRule("strengths", lambda c: c.performance.consistency > 70,
                 "Consistent trading performance"),
    CoachingRule("strengths", lambda c: c.behavior.discipline_score > 80,
                 "Strong discipline with stop losses"),
    CoachingRule("strengths", lambda c: c.performance.sharpe_ratio > 1,
                 "Strong risk-adjusted returns"),

    # Weaknesses
    CoachingRule("weaknesses", lambda c: c.performance.max_drawdown_pct > 25,
                 "High drawdown periods"),
    CoachingRule("weaknesses", lambda c: c.behavior.overconfidence_score > 20,
                 "Overconfidence in high-conviction trades"),
    CoachingRule("weaknesses", _bounded_profit_factor_below(1.2),
                 "Low profit factor"),
    CoachingRule("weaknesses", lambda c: c.behavior.fear_greed_index > 70,
                 "Inconsistent position sizing"),

    # Improvement areas
    CoachingRule("improvement_areas", lambda c: c.performance.sharpe_ratio < 0.5,
                 "Risk-adjusted returns optimization"),
    CoachingRule("improvement_areas", lambda c: c.behavior.discipline_score < 60,
                 "Stop loss discipline"),
    CoachingRule("improvement_areas", lambda c: c.performance.consistency < 50,
                 "Trading consistency"),

    # Personalized tips
    CoachingRule("personalized_tips", lambda c: c.patterns.best_hour is not None,
                 _best_hour_tip),
    CoachingRule("personalized_tips", _has_proven_setup, _best_setup_tip),

    # Mental game
    CoachingRule("mental_game_advice", lambda c: c.behavior.fear_greed_index > 60,
                 "Practice position sizing discipline - fear and greed are affecting your trades"),
    CoachingRule("mental_game_advice", lambda c: c.behavior.overconfidence_score > 15,
                 "Stay humble - overconfidence can lead to larger losses"),
    CoachingRule("mental_game_advice", lambda c: True,
                 "Keep a trading journal to track your emotional state"),
    CoachingRule("mental_game_advice", lambda c: True,
                 "Review losing trades to find improvement opportunities"),
)

# Used when no rule fired for a section
SECTION_FALLBACKS: dict[str, list[str]] = {
    "strengths": ["Building trading experience"],
    "personalized_tips": ["Focus on developing a consistent strategy"],
}


def provide_coaching(
    ctx: CoachingContext,
    rules: tuple[CoachingRule, ...] = COACHING_RULES,
) -> CoachingNotes:
    """
    Map metric thresholds to coaching messages.

    Pure table lookup: no numbers are computed here, every value
    comes from the earlier pipeline stages.  Advisory only.
    """

    sections: dict[str, list[str]] = {
        "strengths": [],
        "weaknesses": [],
        "improvement_areas": [],
        "personalized_tips": [],
        "mental_game_advice": [],
    }

    for rule in rules:
        if not rule.condition(ctx):
            continue
        message = rule.render(ctx)
        if message not in sections[rule.section]:
            sections[rule.section].append(message)

    for section, fallback in SECTION_FALLBACKS.items():
        if not sections[section]:
            sections[section] = list(fallback)

    return CoachingNotes(**sections)


def insufficient_data_coaching(min_trades: int, closed: int) -> CoachingNotes:
    """Coaching shown while the journal is too thin to analyse."""
    return CoachingNotes(
        personalized_tips=[
            f"Log at least {min_trades} closed trades to unlock insights "
            f"({closed} so far)"
        ],
        mental_game_advice=["Keep a trading journal to track your emotional state"],
    )
