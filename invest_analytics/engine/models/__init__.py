"""Engine result models."""

from invest_analytics.engine.models.result import (
    AggregateSentiment,
    CorrelationMatrix,
    RiskMetrics,
    SectorPerformance,
    SectorRotationResult,
    SectorSnapshot,
    SentimentScore,
)

__all__ = [
    "RiskMetrics",
    "SectorPerformance",
    "SectorSnapshot",
    "CorrelationMatrix",
    "SectorRotationResult",
    "SentimentScore",
    "AggregateSentiment",
]
