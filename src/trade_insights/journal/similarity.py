"""Outcome outlook for a proposed trade, from similar past trades.

A past trade is "similar" when enough of its context matches the
proposal.  Matches are weighted (symbol counts most, direction least)
and a trade qualifies when its weighted score exceeds
``SIMILARITY_THRESHOLD`` of the maximum.

Usage::

    proposal = ProposedTrade(symbol="AAPL", strategy="breakout", planned_hour=10)
    outlook = predict_trade_outcome(window, proposal)
    print(outlook.win_probability, outlook.recommendations)
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import Direction
from ..core.models import TradeRecord
from . import metrics as m
from .report import TradeOutcomePrediction
from .window import AnalysisWindow

logger = logging.getLogger(__name__)

# Field → weight; weights sum to 100
SIMILARITY_WEIGHTS: dict[str, int] = {
    "symbol": 30,
    "strategy": 25,
    "market_condition": 20,
    "timeframe": 15,
    "direction": 10,
}
SIMILARITY_THRESHOLD = 0.4
MIN_SIMILAR_TRADES = 3


class ProposedTrade(BaseModel):
    """Context of a trade the user is considering."""

    model_config = ConfigDict(frozen=True)

    symbol: str | None = None
    strategy: str | None = None
    market_condition: str | None = None
    timeframe: str | None = None
    direction: Direction | None = None
    planned_hour: int | None = Field(default=None, ge=0, le=23)  # UTC


def similarity_score(trade: TradeRecord, proposal: ProposedTrade) -> float:
    """Weighted fraction (0-1) of the proposal's context the trade matches."""
    score = 0
    for field_name, weight in SIMILARITY_WEIGHTS.items():
        wanted = getattr(proposal, field_name)
        if wanted is not None and getattr(trade, field_name) == wanted:
            score += weight
    return score / sum(SIMILARITY_WEIGHTS.values())


def find_similar_trades(
    window: AnalysisWindow, proposal: ProposedTrade
) -> list[TradeRecord]:
    return [
        t for t in window.trades
        if similarity_score(t, proposal) > SIMILARITY_THRESHOLD
    ]


def _recommendations(
    similar: list[TradeRecord], proposal: ProposedTrade, win_probability: float
) -> list[str]:
    recs: list[str] = []

    if win_probability > 70:
        recs.append("High probability setup - consider normal position size")
    elif win_probability < 40:
        recs.append("Low probability setup - consider smaller position or skip")

    ratios = [t.risk_reward_ratio for t in similar if t.risk_reward_ratio]
    if ratios:
        avg_rr = m.mean(ratios)
        if avg_rr > 2:
            recs.append("Excellent risk-reward ratio historically")
        elif avg_rr < 1:
            recs.append("Poor risk-reward ratio - improve stop loss or target")

    if proposal.planned_hour is not None:
        same_hour = [t for t in similar if t.entry_hour == proposal.planned_hour]
        if same_hour:
            hour_wr = m.win_rate([t.profit_loss for t in same_hour])
            if hour_wr > 0.6:
                recs.append("Good timing - you perform well at this hour")
            elif hour_wr < 0.4:
                recs.append("Consider waiting - historically poor performance at this hour")

    return recs


def predict_trade_outcome(
    window: AnalysisWindow,
    proposal: ProposedTrade,
) -> TradeOutcomePrediction:
    """Estimate win probability and risk for *proposal*.

    Fewer than ``MIN_SIMILAR_TRADES`` matches yields a neutral outlook
    with low confidence.
    """
    similar = find_similar_trades(window, proposal)
    n = len(similar)
    if n < MIN_SIMILAR_TRADES:
        return TradeOutcomePrediction(
            similar_trades=n,
            recommendations=["Insufficient historical data for accurate prediction"],
        )

    pnls = [float(t.profit_loss) for t in similar]  # type: ignore[arg-type]
    win_probability = m.win_rate(pnls) * 100
    avg = m.mean(pnls)
    std = m.population_std(pnls)
    if std == 0:
        risk = 0.0
    elif avg == 0:
        risk = 100.0
    else:
        risk = min(std / abs(avg) * 50, 100.0)

    logger.debug("Proposal matched %d similar trades", n)

    return TradeOutcomePrediction(
        similar_trades=n,
        win_probability=m.round_metric(win_probability),
        expected_return=m.round_metric(avg),
        risk_score=m.round_metric(risk),
        confidence=m.round_metric(min(n / 10, 0.95)),
        recommendations=_recommendations(similar, proposal, win_probability),
    )
