"""Word polarity lexicon for financial text.

Starts from the VADER valence dictionary and layers financial vocabulary on
top. Words such as "share" or "stock" are neutral in market news even though
general-purpose lexicons score them.
"""

from functools import lru_cache

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

FINANCE_LEXICON: dict[str, float] = {
    # Positive
    "beat": 2.0,
    "beats": 2.0,
    "exceed": 2.0,
    "exceeds": 2.0,
    "exceeded": 2.0,
    "soar": 3.0,
    "soars": 3.0,
    "soared": 3.0,
    "soaring": 3.0,
    "surge": 3.0,
    "surges": 3.0,
    "surged": 3.0,
    "rally": 2.0,
    "rallies": 2.0,
    "rallied": 2.0,
    "jump": 2.0,
    "jumps": 2.0,
    "jumped": 2.0,
    "climb": 1.0,
    "climbs": 1.0,
    "climbed": 1.0,
    "gain": 2.0,
    "gains": 2.0,
    "rebound": 2.0,
    "rebounds": 2.0,
    "upgrade": 2.0,
    "upgraded": 2.0,
    "outperform": 2.0,
    "outperforms": 2.0,
    "bullish": 3.0,
    "profit": 2.0,
    "profits": 2.0,
    "profitable": 2.0,
    "growth": 2.0,
    "buyback": 1.0,
    "breakout": 2.0,
    "upside": 2.0,
    "record": 1.0,
    # Negative
    "miss": -2.0,
    "misses": -2.0,
    "missed": -2.0,
    "plunge": -3.0,
    "plunges": -3.0,
    "plunged": -3.0,
    "plummet": -3.0,
    "plummets": -3.0,
    "plummeted": -3.0,
    "crash": -3.0,
    "crashes": -3.0,
    "crashed": -3.0,
    "tumble": -2.0,
    "tumbles": -2.0,
    "tumbled": -2.0,
    "slump": -2.0,
    "slumps": -2.0,
    "slumped": -2.0,
    "sink": -2.0,
    "sinks": -2.0,
    "sank": -2.0,
    "drop": -2.0,
    "drops": -2.0,
    "dropped": -2.0,
    "fall": -2.0,
    "falls": -2.0,
    "fell": -2.0,
    "decline": -2.0,
    "declines": -2.0,
    "declined": -2.0,
    "loss": -2.0,
    "losses": -2.0,
    "downgrade": -2.0,
    "downgraded": -2.0,
    "underperform": -2.0,
    "underperforms": -2.0,
    "bearish": -3.0,
    "selloff": -2.0,
    "downside": -2.0,
    "layoff": -2.0,
    "layoffs": -2.0,
    "lawsuit": -2.0,
    "bankruptcy": -3.0,
    "recession": -2.0,
    "warns": -2.0,
    # Neutral in market news
    "share": 0.0,
    "shares": 0.0,
    "stock": 0.0,
    "stocks": 0.0,
    "market": 0.0,
    "markets": 0.0,
    "interest": 0.0,
    "security": 0.0,
    "securities": 0.0,
    "fund": 0.0,
    "funds": 0.0,
    "capital": 0.0,
    "yield": 0.0,
}

NEGATORS = frozenset({
    "not", "no", "never", "neither", "nor", "none", "nothing", "hardly",
    "barely", "scarcely", "cannot", "can't", "don't", "doesn't", "didn't",
    "isn't", "aren't", "wasn't", "weren't", "won't", "wouldn't",
    "shouldn't", "couldn't",
})


@lru_cache(maxsize=1)
def default_lexicon() -> dict[str, float]:
    """VADER valences updated with the finance lexicon."""
    lexicon = dict(SentimentIntensityAnalyzer().lexicon)
    lexicon.update(FINANCE_LEXICON)
    return lexicon
