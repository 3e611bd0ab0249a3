"""Analysis window — the validated, ordered set of closed trades.

Raw input from the trade store is normalised here once, so every
analyzer downstream can assume closed, consistent, chronologically
ordered records.  Bad records never abort the batch: each one becomes a
:class:`RecordWarning` and is left out of the window.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from ..core.enums import WarningCode
from ..core.errors import InvalidInputError, MalformedRecordError
from ..core.models import TradeRecord
from .report import RecordWarning, TradeSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisWindow:
    """Closed trades ordered by entry time, plus bookkeeping."""

    trades: tuple[TradeRecord, ...]
    as_of: datetime
    input_count: int = 0
    open_count: int = 0
    warnings: tuple[RecordWarning, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.trades)

    @property
    def pnls(self) -> list[float]:
        """Realised P&L per trade, chronological."""
        return [float(t.profit_loss) for t in self.trades]  # type: ignore[arg-type]

    def recent(self, n: int) -> tuple[TradeRecord, ...]:
        """The last *n* trades of the window."""
        if n <= 0:
            return ()
        return self.trades[-n:]

    def summary(self) -> TradeSummary:
        return TradeSummary(
            input_records=self.input_count,
            closed_trades=len(self.trades),
            open_trades=self.open_count,
            excluded_records=len(self.warnings),
        )

    @classmethod
    def from_trades(
        cls, trades: Iterable[TradeRecord], as_of: datetime | None = None
    ) -> AnalysisWindow:
        """Build a window directly from already-validated closed trades."""
        return build_window(list(trades), as_of=as_of)


def _normalise_as_of(as_of: datetime | None) -> datetime:
    if as_of is None:
        return datetime.max.replace(tzinfo=timezone.utc)
    if as_of.tzinfo is None:
        return as_of.replace(tzinfo=timezone.utc)
    return as_of


def _coerce(index: int, item: Any) -> TradeRecord:
    if isinstance(item, TradeRecord):
        return item
    if isinstance(item, Mapping):
        try:
            return TradeRecord.model_validate(dict(item))
        except ValidationError as exc:
            trade_id = item.get("trade_id", item.get("id"))
            raise MalformedRecordError(
                None if trade_id is None else str(trade_id),
                WarningCode.INVALID_RECORD.value,
                f"{exc.error_count()} validation error(s): "
                + "; ".join(
                    f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}"
                    for e in exc.errors()
                ),
            ) from exc
    raise InvalidInputError(
        f"Trade at index {index} is {type(item).__name__}, "
        "expected TradeRecord or mapping"
    )


def build_window(records: Any, *, as_of: datetime | None = None) -> AnalysisWindow:
    """Validate *records* and return the closed-trade analysis window.

    Parameters
    ----------
    records : Iterable[TradeRecord | Mapping]
        Trades from the store, in any order.
    as_of : datetime | None
        Trades whose exit lies after this instant are excluded: their
        outcome was not yet known at ``as_of``.  ``None`` disables the cut.

    Raises
    ------
    InvalidInputError
        If *records* is ``None``, a string/mapping, not iterable, or holds
        something other than trade records or mappings.
    """
    if records is None:
        raise InvalidInputError("trades must be a sequence of trade records, got None")
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        raise InvalidInputError(
            f"trades must be a sequence of trade records, got {type(records).__name__}"
        )

    cutoff = _normalise_as_of(as_of)
    closed: list[TradeRecord] = []
    warnings: list[RecordWarning] = []
    open_count = 0
    input_count = 0

    for index, item in enumerate(records):
        input_count += 1
        try:
            trade = _coerce(index, item)
            trade.check_lifecycle()
        except MalformedRecordError as exc:
            logger.warning("Excluding malformed trade at index %d: %s", index, exc)
            warnings.append(
                RecordWarning(
                    trade_id=exc.trade_id,
                    index=index,
                    code=WarningCode(exc.code),
                    message=exc.reason,
                )
            )
            continue

        if not trade.is_closed:
            open_count += 1
            continue

        if trade.exit_timestamp > cutoff:  # type: ignore[operator]
            warnings.append(
                RecordWarning(
                    trade_id=trade.trade_id,
                    index=index,
                    code=WarningCode.CLOSED_AFTER_AS_OF,
                    message="trade closed after the as-of timestamp",
                )
            )
            continue

        closed.append(trade)

    # sorted() is stable: equal entry times keep their input order
    closed.sort(key=lambda t: t.entry_timestamp)

    return AnalysisWindow(
        trades=tuple(closed),
        as_of=cutoff,
        input_count=input_count,
        open_count=open_count,
        warnings=tuple(warnings),
    )
