"""Metric primitives — stateless numeric helpers shared by the analyzers.

Every function accepts a plain sequence of floats and returns a plain
Python float (never a numpy scalar), so results serialise cleanly.
Degenerate inputs (empty sequences, zero denominators) resolve to a
defined default instead of raising or producing ``nan``/``inf``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def variance(values: Sequence[float]) -> float:
    """Population variance (divides by N, not N-1)."""
    arr = np.asarray(values, dtype=float)
    # Identical values: exactly zero, not float residue from the mean
    if arr.size == 0 or np.ptp(arr) == 0:
        return 0.0
    return float(np.var(arr))


def population_std(values: Sequence[float]) -> float:
    return math.sqrt(variance(values))


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """``numerator / denominator``, or *default* when the result is undefined."""
    if denominator == 0:
        return default
    result = numerator / denominator
    if not math.isfinite(result):
        return default
    return result


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_pct(value: float) -> float:
    """Clamp a percentage to [0, 100]."""
    return clamp(value, 0.0, 100.0)


def round_metric(value: float, digits: int = 2, default: float = 0.0) -> float:
    """Round for presentation; non-finite values collapse to *default*."""
    if value is None or not math.isfinite(value):
        return default
    result = round(float(value), digits)
    # Avoid "-0.0" in serialised output
    return 0.0 if result == 0 else result


def win_rate(pnls: Sequence[float]) -> float:
    """Fraction of strictly positive values, 0.0 for an empty sequence."""
    if len(pnls) == 0:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls)


@dataclass(frozen=True)
class OutcomeSplit:
    """Wins / losses / break-evens partition of a P&L sequence."""

    wins: tuple[float, ...]
    losses: tuple[float, ...]
    breakevens: int

    @property
    def gross_profit(self) -> float:
        return float(sum(self.wins))

    @property
    def gross_loss(self) -> float:
        """Absolute value of the summed losses."""
        return abs(float(sum(self.losses)))

    @property
    def avg_win(self) -> float:
        return self.gross_profit / len(self.wins) if self.wins else 0.0

    @property
    def avg_loss(self) -> float:
        """Average loss as a positive number."""
        return self.gross_loss / len(self.losses) if self.losses else 0.0


def split_outcomes(pnls: Sequence[float]) -> OutcomeSplit:
    return OutcomeSplit(
        wins=tuple(p for p in pnls if p > 0),
        losses=tuple(p for p in pnls if p < 0),
        breakevens=sum(1 for p in pnls if p == 0),
    )


# ---------------------------------------------------------------------------
# Equity & drawdown
# ---------------------------------------------------------------------------

def equity_curve(pnls: Sequence[float]) -> np.ndarray:
    """Cumulative equity starting from a zero balance."""
    return np.cumsum(np.asarray(pnls, dtype=float))


def drawdown_curve(pnls: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    """Absolute drawdown and running peak at every step.

    The running peak starts at the zero starting balance, so a loss on
    the very first trade is already a drawdown.
    """
    if len(pnls) == 0:
        empty = np.zeros(0)
        return empty, empty
    equity = equity_curve(pnls)
    peaks = np.maximum.accumulate(np.maximum(equity, 0.0))
    return peaks - equity, peaks


def max_drawdown(pnls: Sequence[float]) -> tuple[float, float]:
    """Return ``(max_drawdown, max_drawdown_pct)``.

    The percentage is the deepest per-step decline relative to the peak
    it fell from.  While the peak is still the zero starting balance any
    decline counts as a 100% drawdown.  Clamped to [0, 100].
    """
    drawdowns, peaks = drawdown_curve(pnls)
    if drawdowns.size == 0:
        return 0.0, 0.0

    worst_abs = float(drawdowns.max())
    worst_pct = 0.0
    for dd, peak in zip(drawdowns, peaks):
        if dd <= 0:
            continue
        pct = dd / peak * 100.0 if peak > 0 else 100.0
        worst_pct = max(worst_pct, float(pct))
    return worst_abs, clamp_pct(worst_pct)
