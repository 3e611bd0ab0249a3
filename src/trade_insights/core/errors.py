"""Custom exception hierarchy for the trade insights engine."""


class InsightsError(Exception):
    """Base exception for all trade insights errors."""


# --- Configuration ---
class ConfigError(InsightsError):
    """Invalid or missing configuration."""


# --- Data ---
class DataError(InsightsError):
    """Trade data problem."""


class InvalidInputError(DataError, TypeError):
    """Caller passed something that is not a sequence of trade records.

    This is a contract violation, not a data-quality issue: sparse or
    partially broken trade data never raises.
    """


class MalformedRecordError(DataError):
    """A single trade record violates a record-level invariant.

    Raised during window construction and converted into a
    :class:`~trade_insights.journal.report.RecordWarning`; it never escapes
    :meth:`InsightsEngine.analyze`.
    """

    def __init__(self, trade_id: str | None, code: str, reason: str):
        self.trade_id = trade_id
        self.code = code
        self.reason = reason
        super().__init__(f"Malformed trade [{trade_id}] {code}: {reason}")
