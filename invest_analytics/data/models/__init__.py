"""Data models for market data."""

from invest_analytics.data.models.event import (
    CalendarEvent,
    CalendarEventType,
    DividendMetadata,
    EarningsMetadata,
    EarningsTime,
    EventImportance,
    SplitMetadata,
    filter_events_by_date_range,
    sort_events,
)
from invest_analytics.data.models.news import NewsArticle
from invest_analytics.data.models.portfolio import PortfolioHolding
from invest_analytics.data.models.price import Period, PricePoint, PriceSeries

__all__ = [
    "Period",
    "PricePoint",
    "PriceSeries",
    "PortfolioHolding",
    "NewsArticle",
    "CalendarEvent",
    "CalendarEventType",
    "EventImportance",
    "EarningsTime",
    "EarningsMetadata",
    "DividendMetadata",
    "SplitMetadata",
    "filter_events_by_date_range",
    "sort_events",
]
