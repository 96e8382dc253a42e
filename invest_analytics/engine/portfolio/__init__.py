"""Portfolio-level calculations."""

from invest_analytics.engine.portfolio.risk_metrics import (
    DEFAULT_RISK_FREE_RATE,
    RiskMetricsEngine,
    build_portfolio_value_series,
    validate_holdings,
)

__all__ = [
    "DEFAULT_RISK_FREE_RATE",
    "RiskMetricsEngine",
    "build_portfolio_value_series",
    "validate_holdings",
]
