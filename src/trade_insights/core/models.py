"""Trade record — the engine's only input model.

Records are owned by the external trade store; the engine only reads
them.  Field names follow the journal's snake_case convention, but the
camelCase names emitted by the store's JSON API (``entryPrice``,
``profitLoss``, ``preTradeEmotion`` ...) are accepted on input so rows
can be passed straight through.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .enums import Direction, InstrumentType, TradeOutcome, WarningCode
from .errors import MalformedRecordError


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class TradeRecord(BaseModel):
    """One journaled trade, open or closed.

    ``profit_loss`` is non-null exactly when ``exit_timestamp`` is
    non-null.  The model itself accepts records that break this rule so
    that the analysis window can report them instead of failing the whole
    batch; see :meth:`check_lifecycle`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    # Identity
    trade_id: str | None = Field(default=None, validation_alias=_alias("trade_id", "id"))

    # Instrument
    symbol: str = ""
    instrument_type: InstrumentType = Field(
        default=InstrumentType.STOCK,
        validation_alias=_alias("instrument_type", "instrumentType"),
    )
    direction: Direction = Field(
        default=Direction.LONG, validation_alias=_alias("direction", "type")
    )

    # Economics
    entry_price: float = Field(gt=0, validation_alias=_alias("entry_price", "entryPrice"))
    exit_price: float | None = Field(
        default=None, validation_alias=_alias("exit_price", "exitPrice")
    )
    quantity: float = Field(gt=0)
    stop_loss: float | None = Field(
        default=None, validation_alias=_alias("stop_loss", "stopLoss")
    )
    target_price: float | None = Field(
        default=None, validation_alias=_alias("target_price", "targetPrice")
    )

    # Timing
    entry_timestamp: datetime = Field(
        validation_alias=_alias("entry_timestamp", "entryDate", "entry_date")
    )
    exit_timestamp: datetime | None = Field(
        default=None, validation_alias=_alias("exit_timestamp", "exitDate", "exit_date")
    )

    # Outcome
    profit_loss: float | None = Field(
        default=None, validation_alias=_alias("profit_loss", "profitLoss")
    )

    # Context (all optional, free-form)
    strategy: str | None = None
    market_condition: str | None = Field(
        default=None, validation_alias=_alias("market_condition", "marketCondition")
    )
    setup_description: str | None = Field(
        default=None, validation_alias=_alias("setup_description", "setupDescription")
    )
    pre_trade_emotion: str | None = Field(
        default=None, validation_alias=_alias("pre_trade_emotion", "preTradeEmotion")
    )
    post_trade_emotion: str | None = Field(
        default=None, validation_alias=_alias("post_trade_emotion", "postTradeEmotion")
    )
    confidence: float | None = Field(
        default=None,
        validation_alias=_alias("confidence", "confidenceLevel", "tradeConfidence"),
    )
    quality_rating: float | None = Field(
        default=None, validation_alias=_alias("quality_rating", "tradeRating", "rating")
    )
    timeframe: str | None = Field(
        default=None, validation_alias=_alias("timeframe", "timeFrame")
    )
    risk_reward_ratio: float | None = Field(
        default=None, validation_alias=_alias("risk_reward_ratio", "riskRewardRatio")
    )

    # ------------------------------------------------------------------ #
    # Normalisation                                                        #
    # ------------------------------------------------------------------ #

    @field_validator("trade_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value)

    @field_validator("direction", "instrument_type", mode="before")
    @classmethod
    def _lower_enum(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("entry_timestamp", "exit_timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # Naive timestamps are treated as UTC so they compare with as-of.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    # ------------------------------------------------------------------ #
    # Derived properties                                                   #
    # ------------------------------------------------------------------ #

    @property
    def is_closed(self) -> bool:
        return self.profit_loss is not None and self.exit_timestamp is not None

    @property
    def notional(self) -> float:
        """Position size in quote currency at entry."""
        return self.quantity * self.entry_price

    @property
    def has_stop(self) -> bool:
        return self.stop_loss is not None and self.stop_loss > 0

    @property
    def outcome(self) -> TradeOutcome | None:
        """Win / loss / break-even, or None while the trade is open."""
        if self.profit_loss is None:
            return None
        if self.profit_loss > 0:
            return TradeOutcome.WIN
        if self.profit_loss < 0:
            return TradeOutcome.LOSS
        return TradeOutcome.BREAKEVEN

    @property
    def entry_hour(self) -> int:
        """Hour of entry (0-23) in UTC, whatever offset the record carries."""
        return self.entry_timestamp.astimezone(timezone.utc).hour

    @property
    def hold_duration_seconds(self) -> float:
        if self.exit_timestamp is None:
            return 0.0
        return (self.exit_timestamp - self.entry_timestamp).total_seconds()

    def check_lifecycle(self) -> None:
        """Raise :class:`MalformedRecordError` if the record is inconsistent."""
        if self.profit_loss is not None and self.exit_timestamp is None:
            raise MalformedRecordError(
                self.trade_id,
                WarningCode.PNL_WITHOUT_EXIT.value,
                "profit/loss recorded but no exit timestamp",
            )
        if self.exit_timestamp is not None and self.profit_loss is None:
            raise MalformedRecordError(
                self.trade_id,
                WarningCode.EXIT_WITHOUT_PNL.value,
                "exit timestamp recorded but no profit/loss",
            )
        if (
            self.exit_timestamp is not None
            and self.exit_timestamp < self.entry_timestamp
        ):
            raise MalformedRecordError(
                self.trade_id,
                WarningCode.EXIT_BEFORE_ENTRY.value,
                "exit timestamp precedes entry timestamp",
            )
