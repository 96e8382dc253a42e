"""News sentiment scoring."""

import re

from invest_analytics.data.models import NewsArticle
from invest_analytics.engine.base import SentimentLabel
from invest_analytics.engine.models import AggregateSentiment, SentimentScore
from invest_analytics.engine.sentiment.lexicon import NEGATORS, default_lexicon

SCORE_BOUND = 5.0

# Per-article label thresholds on the clamped score
ARTICLE_BULLISH_THRESHOLD = 1.0
ARTICLE_BEARISH_THRESHOLD = -1.0

# Aggregate thresholds are tighter: many weak signals in one direction count
AGGREGATE_BULLISH_THRESHOLD = 0.5
AGGREGATE_BEARISH_THRESHOLD = -0.5

_TOKEN_RE = re.compile(r"[a-z0-9']+")


def tokenize(text: str) -> list[str]:
    """Lower-case word tokens."""
    if not text:
        return []
    return [t.strip("'") for t in _TOKEN_RE.findall(text.lower()) if t.strip("'")]


def _label_for(score: float, bullish: float, bearish: float) -> SentimentLabel:
    if score > bullish:
        return SentimentLabel.BULLISH
    elif score < bearish:
        return SentimentLabel.BEARISH
    else:
        return SentimentLabel.NEUTRAL


class SentimentScorer:
    """Scores text by summing word polarities.

    Usage:
        scorer = SentimentScorer()
        result = scorer.score_article("Stock soars on earnings beat")
        summary = scorer.aggregate([result])
    """

    def __init__(self, lexicon: dict[str, float] | None = None) -> None:
        """Initialize scorer.

        Args:
            lexicon: Word → polarity mapping. Defaults to VADER plus the
                finance lexicon.
        """
        self._lexicon = lexicon if lexicon is not None else default_lexicon()

    def score(self, text: str) -> SentimentScore:
        """Score a piece of text.

        A polarity word preceded by a negator ("not", "don't", ...) counts
        with its sign flipped.

        Returns:
            SentimentScore with the summed polarity clamped to [-5, 5].
        """
        tokens = tokenize(text)
        raw = 0.0
        positive: list[str] = []
        negative: list[str] = []

        for i, token in enumerate(tokens):
            polarity = self._lexicon.get(token, 0.0)
            if polarity == 0:
                continue
            if i > 0 and tokens[i - 1] in NEGATORS:
                polarity = -polarity
            raw += polarity
            if polarity > 0:
                positive.append(token)
            else:
                negative.append(token)

        score = max(-SCORE_BOUND, min(SCORE_BOUND, raw))
        confidence = round(min(100.0, abs(score) * 20))

        return SentimentScore(
            score=score,
            comparative=raw / len(tokens) if tokens else 0.0,
            label=_label_for(score, ARTICLE_BULLISH_THRESHOLD, ARTICLE_BEARISH_THRESHOLD),
            confidence=confidence,
            positive_words=positive,
            negative_words=negative,
        )

    def score_article(self, title: str, description: str | None = None) -> SentimentScore:
        """Score a news article, weighting the headline twice."""
        text = f"{title} {title} {description}" if description else title
        return self.score(text)

    def aggregate(self, scores: list[SentimentScore]) -> AggregateSentiment:
        """Summarize many article scores.

        Returns:
            AggregateSentiment; neutral with zero counts for an empty list.
        """
        if not scores:
            return AggregateSentiment()

        average = sum(s.score for s in scores) / len(scores)
        return AggregateSentiment(
            average_score=average,
            label=_label_for(average, AGGREGATE_BULLISH_THRESHOLD, AGGREGATE_BEARISH_THRESHOLD),
            bullish_count=sum(1 for s in scores if s.label == SentimentLabel.BULLISH),
            bearish_count=sum(1 for s in scores if s.label == SentimentLabel.BEARISH),
            neutral_count=sum(1 for s in scores if s.label == SentimentLabel.NEUTRAL),
        )

    def enhance_articles(
        self, articles: list[NewsArticle]
    ) -> list[tuple[NewsArticle, SentimentScore]]:
        """Pair each article with its sentiment score."""
        return [(a, self.score_article(a.title, a.description)) for a in articles]
