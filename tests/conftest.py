"""Shared fixtures for the trade-insights test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from trade_insights.core.config import EngineConfig
from trade_insights.core.models import TradeRecord
from trade_insights.journal.engine import InsightsEngine


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------

@pytest.fixture
def base_time() -> datetime:
    return datetime(2024, 1, 2, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def as_of() -> datetime:
    return datetime(2024, 12, 31, 23, 59, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def engine(engine_config) -> InsightsEngine:
    return InsightsEngine(engine_config)


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

@pytest.fixture
def journal_trades(base_time) -> list[TradeRecord]:
    """Twelve closed trades across two strategies plus one open position."""
    trades = []
    pnls = [120.0, -60.0, 80.0, 150.0, -40.0, 90.0, -70.0, 110.0, 60.0, -30.0, 100.0, 45.0]
    for i, pnl in enumerate(pnls):
        entry = base_time + timedelta(days=i)
        trades.append(
            TradeRecord(
                trade_id=str(i + 1),
                symbol="AAPL" if i % 2 == 0 else "MSFT",
                direction="long" if i % 3 else "short",
                entry_price=100.0,
                exit_price=100.0 + pnl / 10,
                quantity=10,
                stop_loss=97.0 if i % 4 else None,
                entry_timestamp=entry,
                exit_timestamp=entry + timedelta(hours=2),
                profit_loss=pnl,
                strategy="breakout" if i % 2 == 0 else "pullback",
                market_condition="Bullish trend" if i < 6 else "Choppy",
                setup_description="flag" if i % 3 == 0 else "retest",
                pre_trade_emotion="calm" if pnl > 0 else "anxious",
                confidence=9 if i % 2 else 6,
            )
        )
    trades.append(
        TradeRecord(
            trade_id="open-1",
            symbol="TSLA",
            entry_price=200.0,
            quantity=5,
            entry_timestamp=base_time + timedelta(days=20),
        )
    )
    return trades
