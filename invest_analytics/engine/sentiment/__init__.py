"""News sentiment calculation module."""

from invest_analytics.engine.sentiment.lexicon import FINANCE_LEXICON, default_lexicon
from invest_analytics.engine.sentiment.scorer import SentimentScorer, tokenize

__all__ = [
    "SentimentScorer",
    "tokenize",
    "FINANCE_LEXICON",
    "default_lexicon",
]
