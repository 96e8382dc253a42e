"""Yahoo Finance price provider implementation."""

import logging
import math
import time
from datetime import datetime, timezone
from threading import Lock

import yfinance as yf

from invest_analytics.data.models import NewsArticle, Period, PricePoint, PriceSeries
from invest_analytics.data.providers.base import DataUnavailable, NewsProvider, PriceProvider

logger = logging.getLogger(__name__)

# Mapping from our Period to yfinance period strings
PERIOD_MAP = {
    Period.ONE_WEEK: "5d",
    Period.ONE_MONTH: "1mo",
    Period.THREE_MONTHS: "3mo",
    Period.SIX_MONTHS: "6mo",
    Period.ONE_YEAR: "1y",
    Period.TWO_YEARS: "2y",
    Period.FIVE_YEARS: "5y",
}


class YahooProvider(PriceProvider, NewsProvider):
    """Yahoo Finance price provider.

    Provides daily closes and news headlines through the yfinance library.
    No authentication required, but has rate limits.
    """

    def __init__(self, rate_limit: float = 0.5) -> None:
        """Initialize Yahoo Finance provider.

        Args:
            rate_limit: Minimum seconds between requests (default 0.5).
        """
        self._rate_limit = rate_limit
        self._last_request_time = 0.0
        self._lock = Lock()

    @property
    def name(self) -> str:
        """Provider name."""
        return "yahoo"

    def _check_rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        with self._lock:
            elapsed = time.time() - self._last_request_time
            if elapsed < self._rate_limit:
                time.sleep(self._rate_limit - elapsed)
            self._last_request_time = time.time()

    def fetch_series(self, ticker: str, period: Period) -> PriceSeries:
        """Get daily closing prices from Yahoo Finance."""
        symbol = self.normalize_symbol(ticker)
        self._check_rate_limit()

        try:
            hist = yf.Ticker(symbol).history(period=PERIOD_MAP[Period(period)], interval="1d")
        except Exception as e:
            logger.error(f"Error getting history for {symbol}: {e}")
            raise DataUnavailable(symbol, str(e)) from e

        if hist is None or hist.empty or "Close" not in hist:
            logger.warning(f"No history data for {symbol}")
            raise DataUnavailable(symbol, "empty history")

        points: dict = {}
        for timestamp, close in hist["Close"].items():
            if close is None or math.isnan(close):
                continue
            # Later rows win if the provider repeats a session
            points[timestamp.date()] = float(close)

        if not points:
            raise DataUnavailable(symbol, "no valid closes")

        return PriceSeries(
            symbol=symbol,
            points=[PricePoint(date=d, close=c) for d, c in points.items()],
            source=self.name,
        )

    def fetch_articles(self, ticker: str) -> list[NewsArticle]:
        """Get recent news headlines from Yahoo Finance."""
        symbol = self.normalize_symbol(ticker)
        self._check_rate_limit()

        try:
            items = yf.Ticker(symbol).news or []
        except Exception as e:
            logger.error(f"Error getting news for {symbol}: {e}")
            raise DataUnavailable(symbol, str(e)) from e

        articles = [a for a in (_parse_news_item(item) for item in items) if a is not None]
        logger.debug(f"Fetched {len(articles)} news articles for {symbol}")
        return articles


def _parse_news_item(item: dict) -> NewsArticle | None:
    """Convert a yfinance news entry to a NewsArticle.

    Newer yfinance releases nest the fields under ``content``.
    """
    content = item.get("content") or item
    title = content.get("title")
    if not title:
        return None

    url = content.get("link")
    canonical = content.get("canonicalUrl")
    if isinstance(canonical, dict):
        url = canonical.get("url") or url

    source = content.get("publisher")
    provider = content.get("provider")
    if isinstance(provider, dict):
        source = provider.get("displayName") or source

    published_at = None
    if content.get("pubDate"):
        try:
            published_at = datetime.fromisoformat(str(content["pubDate"]).replace("Z", "+00:00"))
        except ValueError:
            published_at = None
    elif content.get("providerPublishTime"):
        published_at = datetime.fromtimestamp(int(content["providerPublishTime"]), tz=timezone.utc)

    return NewsArticle(
        title=title,
        description=content.get("summary") or content.get("description"),
        url=url,
        source=source,
        published_at=published_at,
    )
