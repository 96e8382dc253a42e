"""Business layer configuration."""

from invest_analytics.business.config.analytics_config import (
    AnalyticsConfig,
    CacheConfig,
    ProviderConfig,
    RiskConfig,
    SectorConfig,
)

__all__ = [
    "AnalyticsConfig",
    "CacheConfig",
    "ProviderConfig",
    "RiskConfig",
    "SectorConfig",
]
