"""Enumerations used across the trade insights engine."""

from enum import Enum


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


class InstrumentType(str, Enum):
    STOCK = "stock"
    FUTURES = "futures"
    OPTIONS = "options"


class TradeOutcome(str, Enum):
    """Win / loss / break-even classification."""

    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


class MarketCondition(str, Enum):
    """Coarse market-condition bucket derived from a free-text label."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    SIDEWAYS = "sideways"


class RiskTolerance(str, Enum):
    CONSERVATIVE = "Conservative"
    MODERATE = "Moderate"
    AGGRESSIVE = "Aggressive"


class MarketOutlook(str, Enum):
    POSITIVE = "positive"
    CAUTIOUS = "cautious"
    NEUTRAL = "neutral"


class Sentiment(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class DataStatus(str, Enum):
    """Whether the analysis window held enough trades for a full report."""

    OK = "ok"
    INSUFFICIENT_DATA = "insufficient_data"


class WarningCode(str, Enum):
    """Reasons a record was excluded from the analysis window."""

    INVALID_RECORD = "invalid_record"          # Failed schema validation
    PNL_WITHOUT_EXIT = "pnl_without_exit"      # profit_loss set, exit missing
    EXIT_WITHOUT_PNL = "exit_without_pnl"      # exit set, profit_loss missing
    EXIT_BEFORE_ENTRY = "exit_before_entry"
    CLOSED_AFTER_AS_OF = "closed_after_as_of"  # Outcome not known at as-of


class Grade(str, Enum):
    """Overall performance letter grade."""

    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C_PLUS = "C+"
    C = "C"
    D = "D"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


class RiskLevel(str, Enum):
    """Drawdown-based risk bucket."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Reliability(str, Enum):
    """How much history backs the analysis."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EmotionalStateLabel(str, Enum):
    EUPHORIC = "euphoric"
    DISCIPLINED = "disciplined"
    EMOTIONAL = "emotional"
    BALANCED = "balanced"
