"""Market sentiment read from the trader's own recent activity.

Not a view on the market itself: it summarises which way the trader has
been leaning (long vs short) and how that has been working out.
"""

from __future__ import annotations

from ..core.enums import Direction, Sentiment
from . import metrics as m
from .report import MarketSentiment
from .window import AnalysisWindow

MIN_TRADES = 5
LOOKBACK = 10


def generate_market_sentiment(window: AnalysisWindow) -> MarketSentiment:
    """Classify the last few trades as bullish, bearish or neutral."""
    if len(window) < MIN_TRADES:
        return MarketSentiment(
            reasoning=["Insufficient data for sentiment analysis"],
        )

    recent = window.recent(LOOKBACK)
    longs = sum(1 for t in recent if t.direction == Direction.LONG)
    shorts = sum(1 for t in recent if t.direction == Direction.SHORT)
    recent_wr = m.win_rate([t.profit_loss for t in recent])

    score = 0
    reasoning: list[str] = []

    if longs > shorts * 2:
        score += 20
        reasoning.append(f"{longs} long vs {shorts} short trades indicate bullish bias")
    elif shorts > longs * 2:
        score -= 20
        reasoning.append(f"{shorts} short vs {longs} long trades indicate bearish bias")

    if recent_wr > 0.7:
        score += 15
        reasoning.append("High recent win rate suggests positive momentum")
    elif recent_wr < 0.3:
        score -= 15
        reasoning.append("Low recent win rate suggests caution needed")

    if score > 20:
        sentiment = Sentiment.BULLISH
    elif score < -20:
        sentiment = Sentiment.BEARISH
    else:
        sentiment = Sentiment.NEUTRAL

    return MarketSentiment(
        sentiment=sentiment,
        confidence=m.clamp(50.0 + abs(score), 50.0, 95.0),
        reasoning=reasoning,
    )
