"""Insights engine — one entry point for the whole analytics pipeline.

Pipeline::

    records ─► AnalysisWindow ─┬─► performance ─┐
                               ├─► behavior    ─┼─► predictions ─► coaching
                               └─► patterns    ─┘
    performance + behavior ─► scorecard

The three first-stage analyzers are independent and may run
concurrently; predictions and coaching wait for all of them.  Every
stage is a pure function of the window and the config, so analysing the
same records with the same ``as_of`` always produces an identical report.

Usage::

    engine = InsightsEngine(EngineConfig(min_group_samples=3))
    report = engine.analyze(trades, as_of=datetime.now(timezone.utc))
    payload = report.to_json()
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any

from ..core.config import EngineConfig
from ..core.enums import DataStatus
from ..core.errors import InvalidInputError
from .behavioral import analyze_behavior
from .coaching import CoachingContext, insufficient_data_coaching, provide_coaching
from .patterns import recognize_patterns
from .performance import analyze_performance
from .predictive import generate_predictions
from .report import (
    BehavioralMetrics,
    InsightsReport,
    PatternSet,
    PerformanceMetrics,
    PredictiveInsights,
    Scorecard,
    TradeOutcomePrediction,
)
from .scorecard import build_scorecard
from .sentiment import generate_market_sentiment
from .similarity import ProposedTrade, predict_trade_outcome
from .window import AnalysisWindow, build_window

logger = logging.getLogger(__name__)


class InsightsEngine:
    """Stateless façade over the analytics pipeline.

    Parameters
    ----------
    config : EngineConfig | None
        Thresholds and constants.  Defaults to ``EngineConfig()``.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Public API                                                           #
    # ------------------------------------------------------------------ #

    def build_window(self, trades: Any, *, as_of: datetime) -> AnalysisWindow:
        """Validate *trades* into an :class:`AnalysisWindow`."""
        self._require_as_of(as_of)
        return build_window(trades, as_of=as_of)

    def analyze(self, trades: Any, *, as_of: datetime) -> InsightsReport:
        """Run the full pipeline synchronously.

        Parameters
        ----------
        trades : Iterable[TradeRecord | Mapping]
            Trades from the store.  Open and malformed records are
            excluded from the analysis (the latter with a warning).
        as_of : datetime
            Reference instant; trades closed after it are ignored.

        Raises
        ------
        InvalidInputError
            If *trades* is not a sequence of trade records.
        """
        window = self.build_window(trades, as_of=as_of)
        if self._insufficient(window):
            return self._insufficient_report(window)

        if self._config.parallel:
            with ThreadPoolExecutor(max_workers=3, thread_name_prefix="insights") as pool:
                perf_f = pool.submit(analyze_performance, window, self._config)
                behav_f = pool.submit(analyze_behavior, window, self._config)
                pat_f = pool.submit(recognize_patterns, window, self._config)
                performance = perf_f.result()
                behavior = behav_f.result()
                patterns = pat_f.result()
        else:
            performance = analyze_performance(window, self._config)
            behavior = analyze_behavior(window, self._config)
            patterns = recognize_patterns(window, self._config)

        return self._finish(window, performance, behavior, patterns)

    async def analyze_async(self, trades: Any, *, as_of: datetime) -> InsightsReport:
        """Like :meth:`analyze`, running the independent stages in worker threads."""
        window = self.build_window(trades, as_of=as_of)
        if self._insufficient(window):
            return self._insufficient_report(window)

        performance, behavior, patterns = await asyncio.gather(
            asyncio.to_thread(analyze_performance, window, self._config),
            asyncio.to_thread(analyze_behavior, window, self._config),
            asyncio.to_thread(recognize_patterns, window, self._config),
        )
        return self._finish(window, performance, behavior, patterns)

    def predict_trade(
        self, trades: Any, proposal: ProposedTrade, *, as_of: datetime
    ) -> TradeOutcomePrediction:
        """Outlook for a proposed trade based on similar closed trades."""
        window = self.build_window(trades, as_of=as_of)
        return predict_trade_outcome(window, proposal)

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _require_as_of(as_of: Any) -> None:
        if not isinstance(as_of, datetime):
            raise InvalidInputError(
                f"as_of must be a datetime, got {type(as_of).__name__}"
            )

    def _insufficient(self, window: AnalysisWindow) -> bool:
        return len(window) < self._config.min_trades

    def _insufficient_report(self, window: AnalysisWindow) -> InsightsReport:
        logger.info(
            "Insufficient data: %d closed trade(s), %d required",
            len(window),
            self._config.min_trades,
        )
        return InsightsReport(
            as_of=window.as_of,
            data_status=DataStatus.INSUFFICIENT_DATA,
            summary=window.summary(),
            performance=PerformanceMetrics(insufficient_data=True),
            behavior=BehavioralMetrics(insufficient_data=True),
            patterns=PatternSet(insufficient_data=True),
            predictions=PredictiveInsights(insufficient_data=True),
            coaching=insufficient_data_coaching(self._config.min_trades, len(window)),
            sentiment=generate_market_sentiment(window),
            scorecard=Scorecard(insufficient_data=True),
            warnings=window.warnings,
        )

    def _finish(
        self,
        window: AnalysisWindow,
        performance: PerformanceMetrics,
        behavior: BehavioralMetrics,
        patterns: PatternSet,
    ) -> InsightsReport:
        predictions = generate_predictions(
            window, performance, behavior, patterns, self._config
        )
        coaching = provide_coaching(
            CoachingContext(
                performance=performance,
                behavior=behavior,
                patterns=patterns,
                predictions=predictions,
            )
        )

        logger.debug(
            "Insights generated: %d trades, %d warnings",
            len(window),
            len(window.warnings),
        )

        return InsightsReport(
            as_of=window.as_of,
            data_status=DataStatus.OK,
            summary=window.summary(),
            performance=performance,
            behavior=behavior,
            patterns=patterns,
            predictions=predictions,
            coaching=coaching,
            sentiment=generate_market_sentiment(window),
            scorecard=build_scorecard(window, performance, behavior),
            warnings=window.warnings,
        )
