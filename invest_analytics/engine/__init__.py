"""Calculation Engine Layer.

Turns price series and text from the data layer into analytics bundles for
the business layer.

Architecture:
- returns/: Return-series statistics (volatility, Sharpe, beta, drawdown, VaR)
- portfolio/: Portfolio risk metrics built from holdings
- sector/: Sector rotation (relative strength, momentum, correlation)
- sentiment/: Lexicon-based news sentiment
- models/: Result dataclasses with their JSON bundle form
"""

from invest_analytics.engine.base import (
    ComputeError,
    Momentum,
    RotationSignal,
    SentimentLabel,
)
from invest_analytics.engine.models import (
    AggregateSentiment,
    CorrelationMatrix,
    RiskMetrics,
    SectorPerformance,
    SectorRotationResult,
    SectorSnapshot,
    SentimentScore,
)
from invest_analytics.engine.portfolio import RiskMetricsEngine
from invest_analytics.engine.sector import SECTOR_ETFS, SectorRotationEngine
from invest_analytics.engine.sentiment import SentimentScorer

__all__ = [
    # Base types
    "ComputeError",
    "Momentum",
    "RotationSignal",
    "SentimentLabel",
    # Results
    "AggregateSentiment",
    "CorrelationMatrix",
    "RiskMetrics",
    "SectorPerformance",
    "SectorRotationResult",
    "SectorSnapshot",
    "SentimentScore",
    # Engines
    "RiskMetricsEngine",
    "SectorRotationEngine",
    "SentimentScorer",
    "SECTOR_ETFS",
]
