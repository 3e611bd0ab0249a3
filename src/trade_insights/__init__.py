"""Trade insights — analytics engine for a personal trading journal."""

from .core.config import EngineConfig, Settings, load_settings
from .core.models import TradeRecord
from .journal import InsightsEngine, InsightsReport

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "Settings",
    "load_settings",
    "TradeRecord",
    "InsightsEngine",
    "InsightsReport",
]
