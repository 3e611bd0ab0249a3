"""Shared fixtures for journal analytics tests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import pytest

from trade_insights.core.config import EngineConfig
from trade_insights.core.models import TradeRecord
from trade_insights.journal.window import AnalysisWindow, build_window

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_trade(
    pnl: float | None = 100.0,
    *,
    trade_id: str | None = None,
    entry_time: datetime | None = None,
    hold: timedelta = timedelta(hours=1),
    entry_price: float = 10.0,
    quantity: float = 1.0,
    stop_loss: float | None = None,
    direction: str = "long",
    symbol: str = "AAPL",
    **context,
) -> TradeRecord:
    """Create a trade; ``pnl=None`` gives an open position."""
    entry = entry_time or T0
    closed = pnl is not None
    return TradeRecord(
        trade_id=trade_id,
        symbol=symbol,
        direction=direction,
        entry_price=entry_price,
        exit_price=entry_price + pnl / quantity if closed else None,
        quantity=quantity,
        stop_loss=stop_loss,
        entry_timestamp=entry,
        exit_timestamp=entry + hold if closed else None,
        profit_loss=pnl,
        **context,
    )


def make_series(
    pnls: Sequence[float],
    *,
    spacing: timedelta = timedelta(days=1),
    start: datetime | None = None,
    **kwargs,
) -> list[TradeRecord]:
    """One trade per P&L value, entered *spacing* apart."""
    start = start or T0
    return [
        make_trade(pnl, trade_id=str(i), entry_time=start + spacing * i, **kwargs)
        for i, pnl in enumerate(pnls)
    ]


def window_of(trades: Sequence[TradeRecord]) -> AnalysisWindow:
    return build_window(list(trades), as_of=T0 + timedelta(days=3650))


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def empty_window() -> AnalysisWindow:
    return window_of([])
