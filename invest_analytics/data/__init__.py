"""Data layer: market data models, providers and caching."""

from invest_analytics.data.models import (
    NewsArticle,
    Period,
    PortfolioHolding,
    PricePoint,
    PriceSeries,
)

__all__ = [
    "Period",
    "PricePoint",
    "PriceSeries",
    "PortfolioHolding",
    "NewsArticle",
]
