"""Behavioral analyzer — psychological and discipline scores.

Scores the trader's habits rather than their results: how well
self-reported confidence predicts outcomes, how erratic position sizing
is, whether stops are used, and whether trade frequency or post-loss
sizing suggests emotional decision-making.

Every score degrades to a neutral value when the optional journal
metadata (confidence, emotion, stop-loss) is missing entirely.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import timedelta

from ..core.config import EngineConfig
from ..core.enums import RiskTolerance
from ..core.models import TradeRecord
from . import metrics as m
from .report import BehavioralMetrics, EmotionTrend
from .window import AnalysisWindow

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86_400.0


@dataclass
class _EmotionBucket:
    count: int = 0
    wins: int = 0
    total_pnl: float = 0.0


def overconfidence_score(
    trades: tuple[TradeRecord, ...], high_confidence_threshold: float
) -> float:
    """How far high-confidence trades fall short of the overall win rate.

    0 when no trade carries a confidence rating at or above the
    threshold, or when confident trades win at least as often as the rest.
    """
    if not trades:
        return 0.0
    confident = [
        t for t in trades
        if t.confidence is not None and t.confidence >= high_confidence_threshold
    ]
    if not confident:
        return 0.0
    overall = m.win_rate([t.profit_loss for t in trades])
    high = m.win_rate([t.profit_loss for t in confident])
    return m.clamp_pct((overall - high) * 100)


def fear_greed_index(trades: tuple[TradeRecord, ...]) -> float:
    """Dispersion of position notional relative to its mean, as a percent."""
    sizes = [t.notional for t in trades]
    avg = m.mean(sizes)
    if avg <= 0:
        return 0.0
    return m.clamp_pct(m.population_std(sizes) / avg * 100)


def discipline_score(trades: tuple[TradeRecord, ...]) -> float:
    """Percentage of trades entered with an explicit stop-loss."""
    if not trades:
        return 0.0
    return sum(1 for t in trades if t.has_stop) / len(trades) * 100


def trades_per_day(trades: tuple[TradeRecord, ...]) -> float:
    """Trades per day over the entry-time span, with a one-day minimum span."""
    if not trades:
        return 0.0
    first = min(t.entry_timestamp for t in trades)
    last = max(t.entry_timestamp for t in trades)
    days = max(1.0, (last - first).total_seconds() / _SECONDS_PER_DAY)
    return len(trades) / days


def overtrading_risk(rate: float, low: float, high: float) -> float:
    """Linear ramp: 0 at or below *low* trades/day, 100 at or above *high*."""
    return m.clamp_pct((rate - low) / (high - low) * 100)


def count_revenge_trades(
    trades: tuple[TradeRecord, ...],
    size_increase: float,
    window: timedelta,
) -> int:
    """Count losing trades followed quickly by a noticeably larger one.

    A pair is flagged when the first trade lost money, the second starts
    within *window* of the first's exit (before or after it, so a bigger
    re-entry while the loser is still open counts), and the second's
    notional exceeds the first's by more than *size_increase*.
    """
    flagged = 0
    for prev, nxt in zip(trades, trades[1:]):
        if prev.profit_loss is None or prev.profit_loss >= 0:
            continue
        if prev.exit_timestamp is None:
            continue
        gap = nxt.entry_timestamp - prev.exit_timestamp
        if abs(gap) > window:
            continue
        if nxt.notional > prev.notional * (1 + size_increase):
            flagged += 1
    return flagged


def emotional_trends(trades: tuple[TradeRecord, ...]) -> list[EmotionTrend]:
    """Outcome statistics per pre-trade emotion label.

    Trades journaled with only a post-trade emotion count as "neutral"
    going in; trades with no emotion at all are skipped.
    """
    buckets: dict[str, _EmotionBucket] = defaultdict(_EmotionBucket)
    for t in trades:
        if not (t.pre_trade_emotion or t.post_trade_emotion):
            continue
        label = (t.pre_trade_emotion or "neutral").strip().lower() or "neutral"
        bucket = buckets[label]
        bucket.count += 1
        bucket.total_pnl += float(t.profit_loss or 0.0)
        if (t.profit_loss or 0.0) > 0:
            bucket.wins += 1

    return [
        EmotionTrend(
            emotion=label,
            frequency=b.count,
            avg_pnl=m.round_metric(b.total_pnl / b.count),
            win_rate=m.round_metric(b.wins / b.count * 100),
        )
        for label, b in buckets.items()
    ]


def average_risk_pct(trades: tuple[TradeRecord, ...], default_risk_pct: float) -> float:
    """Mean per-trade risk as a fraction of entry price."""
    if not trades:
        return 0.0
    risks = [
        abs(t.entry_price - t.stop_loss) / t.entry_price  # type: ignore[operator]
        if t.has_stop
        else default_risk_pct
        for t in trades
    ]
    return m.mean(risks)


def classify_risk_tolerance(avg_risk: float, config: EngineConfig) -> RiskTolerance:
    if avg_risk < config.conservative_risk_pct:
        return RiskTolerance.CONSERVATIVE
    if avg_risk < config.moderate_risk_pct:
        return RiskTolerance.MODERATE
    return RiskTolerance.AGGRESSIVE


def analyze_behavior(
    window: AnalysisWindow, config: EngineConfig | None = None
) -> BehavioralMetrics:
    """Compute :class:`BehavioralMetrics` for the window."""
    config = config or EngineConfig()
    trades = window.trades
    if not trades:
        return BehavioralMetrics()

    rate = trades_per_day(trades)
    revenge = count_revenge_trades(
        trades,
        config.revenge_size_increase,
        timedelta(minutes=config.revenge_window_minutes),
    )
    revenge_risk = m.clamp_pct(revenge / len(trades) * config.revenge_risk_multiplier)
    avg_risk = average_risk_pct(trades, config.default_risk_pct)

    if revenge:
        logger.info("Revenge-trading pattern: %d flagged trade pair(s)", revenge)

    return BehavioralMetrics(
        overconfidence_score=m.round_metric(
            overconfidence_score(trades, config.high_confidence_threshold)
        ),
        fear_greed_index=m.round_metric(fear_greed_index(trades)),
        discipline_score=m.round_metric(discipline_score(trades)),
        overtrading_risk=m.round_metric(
            overtrading_risk(rate, config.overtrading_low, config.overtrading_high)
        ),
        revenge_trading_risk=m.round_metric(revenge_risk),
        emotional_trends=emotional_trends(trades),
        risk_tolerance=classify_risk_tolerance(avg_risk, config),
        trades_per_day=m.round_metric(rate),
        revenge_trade_count=revenge,
        avg_risk_pct=m.round_metric(avg_risk * 100),
    )
