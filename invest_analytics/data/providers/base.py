"""Abstract base classes for data providers."""

from abc import ABC, abstractmethod

from invest_analytics.data.models import NewsArticle, Period, PriceSeries


class PriceProvider(ABC):
    """Abstract base class for historical price providers.

    Implementations return daily closing prices and signal failure with
    ``DataUnavailable`` rather than returning partial data.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'yahoo')."""
        pass

    @abstractmethod
    def fetch_series(self, ticker: str, period: Period) -> PriceSeries:
        """Get daily closing prices over a lookback period.

        Args:
            ticker: Stock or index symbol.
            period: Lookback period.

        Returns:
            PriceSeries ordered oldest to newest.

        Raises:
            DataUnavailable: Ticker unknown, no data, or provider unreachable.
        """
        pass

    def normalize_symbol(self, symbol: str) -> str:
        """Normalize symbol format for this provider.

        Override in subclass if provider uses different format.
        """
        return symbol.strip().upper()


class NewsProvider(ABC):
    """Abstract base class for news providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    @abstractmethod
    def fetch_articles(self, ticker: str) -> list[NewsArticle]:
        """Get recent news articles for a ticker.

        Raises:
            DataUnavailable: Source failed or returned nothing usable.
        """
        pass


class DataProviderError(Exception):
    """Base exception for data provider errors."""

    pass


class DataUnavailable(DataProviderError):
    """Upstream data source failed or returned nothing."""

    def __init__(self, symbol: str, reason: str = "no data") -> None:
        super().__init__(f"Data unavailable for {symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason


class RequestTimeoutError(DataProviderError):
    """Fetching inputs for a request exceeded its time budget."""

    pass
