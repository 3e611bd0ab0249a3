"""Insights report models.

Every stage of the pipeline returns one of these frozen pydantic models
and the engine composes them into an :class:`InsightsReport`.  All
fields are JSON-native and sequences are tuples, so a built report
cannot be mutated.  Unbounded ratios are represented as ``None``
plus an explicit ``*_unbounded`` flag, never as a float infinity.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import (
    DataStatus,
    EmotionalStateLabel,
    Grade,
    MarketOutlook,
    Priority,
    Reliability,
    RiskLevel,
    RiskTolerance,
    Sentiment,
    WarningCode,
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------

class PerformanceMetrics(_Frozen):
    """Risk / return metrics over the closed trades of the window."""

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0
    win_rate: float = 0.0  # Percent
    total_return: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0  # Positive number

    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0  # Currency
    max_drawdown_pct: float = 0.0
    calmar_ratio: float = 0.0
    win_loss_ratio: float = 0.0
    profit_factor: float | None = 0.0  # None when unbounded
    profit_factor_unbounded: bool = False
    expectancy: float = 0.0
    consistency: float = 0.0
    volatility: float = 0.0

    insufficient_data: bool = False


# ---------------------------------------------------------------------------
# Behaviour
# ---------------------------------------------------------------------------

class EmotionTrend(_Frozen):
    emotion: str
    frequency: int
    avg_pnl: float
    win_rate: float  # Percent


class BehavioralMetrics(_Frozen):
    overconfidence_score: float = 0.0
    fear_greed_index: float = 0.0
    discipline_score: float = 0.0
    overtrading_risk: float = 0.0
    revenge_trading_risk: float = 0.0
    emotional_trends: tuple[EmotionTrend, ...] = Field(default_factory=tuple)
    risk_tolerance: RiskTolerance = RiskTolerance.MODERATE

    trades_per_day: float = 0.0
    revenge_trade_count: int = 0
    avg_risk_pct: float = 0.0

    insufficient_data: bool = False


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

class GroupStats(_Frozen):
    """Per-group frequency and outcome statistics."""

    key: str
    count: int = 0
    wins: int = 0
    total_pnl: float = 0.0
    win_rate: float = 0.0  # Percent
    avg_return: float = 0.0
    share_pct: float = 0.0  # Share of all trades in the window
    eligible: bool = False  # Meets the minimum sample size for best/worst


class HourStats(GroupStats):
    hour: int = 0


class MarketConditionBreakdown(_Frozen):
    bullish: GroupStats = Field(default_factory=lambda: GroupStats(key="bullish"))
    bearish: GroupStats = Field(default_factory=lambda: GroupStats(key="bearish"))
    sideways: GroupStats = Field(default_factory=lambda: GroupStats(key="sideways"))


class PatternSet(_Frozen):
    by_strategy: tuple[GroupStats, ...] = Field(default_factory=tuple)
    by_market_condition: MarketConditionBreakdown = Field(
        default_factory=MarketConditionBreakdown
    )
    by_hour: tuple[HourStats, ...] = Field(default_factory=tuple)
    by_setup: tuple[GroupStats, ...] = Field(default_factory=tuple)

    best_strategy: str | None = None
    worst_strategy: str | None = None
    best_hour: int | None = None
    worst_hour: int | None = None
    best_setup: str | None = None

    insufficient_data: bool = False

    def strategy(self, key: str) -> GroupStats | None:
        return next((g for g in self.by_strategy if g.key == key), None)

    def setup(self, key: str) -> GroupStats | None:
        return next((g for g in self.by_setup if g.key == key), None)


# ---------------------------------------------------------------------------
# Predictions & coaching
# ---------------------------------------------------------------------------

class PredictiveInsights(_Frozen):
    next_trade_success_pct: float = 50.0
    optimal_position_size_pct: float = 1.0
    kelly_fraction: float = 0.0  # Raw, unclamped Kelly output
    recent_win_rate: float = 50.0  # Percent
    suggested_strategies: tuple[str, ...] = Field(default_factory=tuple)
    risk_warnings: tuple[str, ...] = Field(default_factory=tuple)
    market_outlook: MarketOutlook = MarketOutlook.NEUTRAL

    insufficient_data: bool = False


class CoachingNotes(_Frozen):
    strengths: tuple[str, ...] = Field(default_factory=tuple)
    weaknesses: tuple[str, ...] = Field(default_factory=tuple)
    improvement_areas: tuple[str, ...] = Field(default_factory=tuple)
    personalized_tips: tuple[str, ...] = Field(default_factory=tuple)
    mental_game_advice: tuple[str, ...] = Field(default_factory=tuple)


class MarketSentiment(_Frozen):
    sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: float = 50.0
    reasoning: tuple[str, ...] = Field(default_factory=tuple)


class TradeOutcomePrediction(_Frozen):
    """Outlook for a proposed trade based on similar past trades."""

    similar_trades: int = 0
    win_probability: float = 50.0
    expected_return: float = 0.0
    risk_score: float = 50.0
    confidence: float = 0.3
    recommendations: tuple[str, ...] = Field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Scorecard
# ---------------------------------------------------------------------------

class PerformanceGrade(_Frozen):
    """Weighted composite of performance and behaviour scores."""

    grade: Grade = Grade.D
    score: int = 0  # 0-100
    description: str = "Needs Improvement"


class PriorityAction(_Frozen):
    priority: Priority
    action: str
    reason: str
    impact: str


class TrendFlags(_Frozen):
    # Not mutually exclusive
    improving: bool = False
    declining: bool = False
    stable: bool = False


class EmotionalState(_Frozen):
    state: EmotionalStateLabel = EmotionalStateLabel.BALANCED
    description: str = "Reasonable emotional control"
    recommendation: str = "Continue building mental discipline"


class SetupPerformance(_Frozen):
    setup: str
    trades: int
    total_pnl: float
    avg_pnl: float
    win_rate: float  # Percent


class MonthlyPerformance(_Frozen):
    month: str  # "YYYY-MM", UTC
    trades: int
    pnl: float
    win_rate: float  # Percent


class Scorecard(_Frozen):
    """Summary verdicts derived from the other report sections."""

    grade: PerformanceGrade = Field(default_factory=PerformanceGrade)
    risk_level: RiskLevel = RiskLevel.LOW
    trends: TrendFlags = Field(default_factory=TrendFlags)
    emotional_state: EmotionalState = Field(default_factory=EmotionalState)
    priority_actions: tuple[PriorityAction, ...] = Field(default_factory=tuple)
    top_setups: tuple[SetupPerformance, ...] = Field(default_factory=tuple)
    monthly_performance: tuple[MonthlyPerformance, ...] = Field(default_factory=tuple)
    reliability: Reliability = Reliability.LOW

    insufficient_data: bool = False


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

class RecordWarning(_Frozen):
    """A record excluded from the analysis window, and why."""

    trade_id: str | None = None
    index: int  # Position in the caller's input sequence
    code: WarningCode
    message: str


class TradeSummary(_Frozen):
    input_records: int = 0
    closed_trades: int = 0
    open_trades: int = 0
    excluded_records: int = 0


class InsightsReport(_Frozen):
    as_of: datetime
    data_status: DataStatus = DataStatus.OK
    summary: TradeSummary = Field(default_factory=TradeSummary)
    performance: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    behavior: BehavioralMetrics = Field(default_factory=BehavioralMetrics)
    patterns: PatternSet = Field(default_factory=PatternSet)
    predictions: PredictiveInsights = Field(default_factory=PredictiveInsights)
    coaching: CoachingNotes = Field(default_factory=CoachingNotes)
    sentiment: MarketSentiment = Field(default_factory=MarketSentiment)
    scorecard: Scorecard = Field(default_factory=Scorecard)
    warnings: tuple[RecordWarning, ...] = Field(default_factory=tuple)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise deterministically (field order is declaration order)."""
        return self.model_dump_json(indent=indent)
