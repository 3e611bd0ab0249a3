"""Pattern recognizer — performance broken down by trade context.

Groups the window by strategy label, coarse market condition, hour of
entry (UTC) and setup description.  Answers questions like "Which setup do I
actually make money with?" or "Should I stop trading after lunch?"

Groups too small to be meaningful are still reported (flagged
``eligible=False``) but never chosen as a best/worst group.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import TypeVar

from ..core.config import EngineConfig
from ..core.enums import MarketCondition
from ..core.models import TradeRecord
from . import metrics as m
from .report import GroupStats, HourStats, MarketConditionBreakdown, PatternSet
from .window import AnalysisWindow

logger = logging.getLogger(__name__)

UNKNOWN_STRATEGY = "Unknown"
UNKNOWN_SETUP = "Unknown Setup"

K = TypeVar("K", bound=Hashable)
G = TypeVar("G", bound=GroupStats)


@dataclass
class _BucketStats:
    """Accumulator for one group."""

    trades: int = 0
    wins: int = 0
    total_pnl: float = 0.0

    def record(self, trade: TradeRecord) -> None:
        pnl = float(trade.profit_loss or 0.0)
        self.trades += 1
        self.total_pnl += pnl
        if pnl > 0:
            self.wins += 1

    def to_stats(self, key: str, total: int, min_samples: int) -> GroupStats:
        return GroupStats(key=key, **self._fields(total, min_samples))

    def to_hour_stats(self, hour: int, total: int, min_samples: int) -> HourStats:
        return HourStats(key=f"{hour:02d}:00", hour=hour, **self._fields(total, min_samples))

    def _fields(self, total: int, min_samples: int) -> dict:
        if self.trades == 0:
            return {"count": 0}
        return {
            "count": self.trades,
            "wins": self.wins,
            "total_pnl": m.round_metric(self.total_pnl),
            "win_rate": m.round_metric(self.wins / self.trades * 100),
            "avg_return": m.round_metric(self.total_pnl / self.trades),
            "share_pct": m.round_metric(m.safe_ratio(self.trades, total) * 100),
            "eligible": self.trades >= min_samples,
        }


def _label(value: str | None, default: str) -> str:
    if value is None:
        return default
    value = value.strip()
    return value or default


def classify_market_condition(label: str | None) -> MarketCondition:
    """Map a free-text market condition onto bullish / bearish / sideways."""
    text = (label or "").lower()
    if "bull" in text:
        return MarketCondition.BULLISH
    if "bear" in text:
        return MarketCondition.BEARISH
    return MarketCondition.SIDEWAYS


def _group(
    trades: tuple[TradeRecord, ...], key_fn: Callable[[TradeRecord], K]
) -> dict[K, _BucketStats]:
    buckets: dict[K, _BucketStats] = defaultdict(_BucketStats)
    for t in trades:
        buckets[key_fn(t)].record(t)
    return buckets


def _rank_key(g: GroupStats) -> tuple[float, float]:
    return (g.win_rate, g.avg_return)


def best_group(groups: list[G]) -> G | None:
    """Highest win rate (then average return) among eligible groups."""
    eligible = [g for g in groups if g.eligible]
    if not eligible:
        return None
    # max() keeps the first of equal elements, so ties go to the earlier group
    return max(eligible, key=_rank_key)


def worst_group(groups: list[G]) -> G | None:
    eligible = [g for g in groups if g.eligible]
    if not eligible:
        return None
    return min(eligible, key=_rank_key)


def recognize_patterns(
    window: AnalysisWindow, config: EngineConfig | None = None
) -> PatternSet:
    """Compute the :class:`PatternSet` for the window."""
    config = config or EngineConfig()
    trades = window.trades
    if not trades:
        return PatternSet()

    n = len(trades)
    min_samples = config.min_group_samples

    by_strategy = [
        stats.to_stats(key, n, min_samples)
        for key, stats in _group(trades, lambda t: _label(t.strategy, UNKNOWN_STRATEGY)).items()
    ]
    by_setup = [
        stats.to_stats(key, n, min_samples)
        for key, stats in _group(
            trades, lambda t: _label(t.setup_description, UNKNOWN_SETUP)
        ).items()
    ]
    by_hour = [
        stats.to_hour_stats(hour, n, min_samples)
        for hour, stats in sorted(_group(trades, lambda t: t.entry_hour).items())
    ]

    conditions = _group(trades, lambda t: classify_market_condition(t.market_condition))
    by_condition = MarketConditionBreakdown(
        **{
            cond.value: conditions.get(cond, _BucketStats()).to_stats(
                cond.value, n, min_samples
            )
            for cond in MarketCondition
        }
    )

    best_strat = best_group(by_strategy)
    worst_strat = worst_group(by_strategy)
    best_hr = best_group(by_hour)
    worst_hr = worst_group(by_hour)
    best_set = best_group(by_setup)

    logger.debug(
        "Patterns: %d strategies, %d setups, %d active hours",
        len(by_strategy),
        len(by_setup),
        len(by_hour),
    )

    return PatternSet(
        by_strategy=by_strategy,
        by_market_condition=by_condition,
        by_hour=by_hour,
        by_setup=by_setup,
        best_strategy=best_strat.key if best_strat else None,
        worst_strategy=worst_strat.key if worst_strat else None,
        best_hour=best_hr.hour if best_hr else None,
        worst_hour=worst_hr.hour if worst_hr else None,
        best_setup=best_set.key if best_set else None,
    )
