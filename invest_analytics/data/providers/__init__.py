"""Market data providers."""

from invest_analytics.data.providers.base import (
    DataProviderError,
    DataUnavailable,
    NewsProvider,
    PriceProvider,
    RequestTimeoutError,
)
from invest_analytics.data.providers.yahoo_provider import YahooProvider

__all__ = [
    "PriceProvider",
    "NewsProvider",
    "DataProviderError",
    "DataUnavailable",
    "RequestTimeoutError",
    "YahooProvider",
]
