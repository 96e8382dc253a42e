"""Sector rotation calculations."""

from invest_analytics.engine.sector.correlation import (
    build_correlation_matrix,
    calc_pairwise_correlation,
)
from invest_analytics.engine.sector.rotation import (
    DEFAULT_SIGNAL_POLICY,
    DEFAULT_STRONG_THRESHOLD,
    SECTOR_ETFS,
    SectorRotationEngine,
    calc_performance,
    calc_period_return,
    calc_relative_strength,
    classify_momentum,
    common_end_date,
    determine_signal,
)

__all__ = [
    "SectorRotationEngine",
    "SECTOR_ETFS",
    "DEFAULT_SIGNAL_POLICY",
    "DEFAULT_STRONG_THRESHOLD",
    "calc_period_return",
    "calc_performance",
    "calc_relative_strength",
    "classify_momentum",
    "common_end_date",
    "determine_signal",
    "calc_pairwise_correlation",
    "build_correlation_matrix",
]
