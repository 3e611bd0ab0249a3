"""Trading journal analytics — self-measurement from closed trades.

Turns a journal of closed trades into a structured insights report.

Key components
--------------
**Input**

AnalysisWindow        Validated, chronologically ordered closed trades
build_window          Raw records → AnalysisWindow (malformed ones warned)

**Independent analyzers**

analyze_performance   Sharpe, drawdown, Calmar, profit factor, expectancy
analyze_behavior      Overconfidence, fear/greed, discipline, overtrading,
                      revenge trading, emotional trends, risk tolerance
recognize_patterns    Strategy / market condition / hour / setup breakdowns

**Dependent stages**

generate_predictions  Success probability, Kelly sizing, risk warnings
provide_coaching      Rule table from metric thresholds to advice
build_scorecard       Letter grade, priority actions, risk and trend verdicts

**Extras**

generate_market_sentiment   Long/short bias and momentum of recent trades
predict_trade_outcome       Outlook for a proposed trade

**Orchestration**

InsightsEngine        Runs the pipeline and assembles the InsightsReport
"""

from .behavioral import analyze_behavior
from .coaching import COACHING_RULES, CoachingContext, CoachingRule, provide_coaching
from .engine import InsightsEngine
from .patterns import recognize_patterns
from .performance import analyze_performance
from .predictive import RISK_WARNING_RULES, generate_predictions
from .report import (
    BehavioralMetrics,
    CoachingNotes,
    InsightsReport,
    MarketSentiment,
    PatternSet,
    PerformanceMetrics,
    PredictiveInsights,
    RecordWarning,
    Scorecard,
    TradeOutcomePrediction,
)
from .scorecard import PRIORITY_ACTION_RULES, build_scorecard
from .sentiment import generate_market_sentiment
from .similarity import ProposedTrade, predict_trade_outcome
from .window import AnalysisWindow, build_window

__all__ = [
    "AnalysisWindow",
    "build_window",
    "analyze_performance",
    "analyze_behavior",
    "recognize_patterns",
    "generate_predictions",
    "RISK_WARNING_RULES",
    "provide_coaching",
    "COACHING_RULES",
    "CoachingContext",
    "CoachingRule",
    "build_scorecard",
    "PRIORITY_ACTION_RULES",
    "generate_market_sentiment",
    "predict_trade_outcome",
    "ProposedTrade",
    "InsightsEngine",
    "InsightsReport",
    "PerformanceMetrics",
    "BehavioralMetrics",
    "PatternSet",
    "PredictiveInsights",
    "CoachingNotes",
    "MarketSentiment",
    "Scorecard",
    "RecordWarning",
    "TradeOutcomePrediction",
]
