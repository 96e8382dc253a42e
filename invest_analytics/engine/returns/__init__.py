"""Returns and risk calculation module."""

from invest_analytics.engine.returns.risk import (
    TRADING_DAYS_PER_YEAR,
    calc_beta,
    calc_cagr,
    calc_correlation,
    calc_daily_returns,
    calc_downside_deviation,
    calc_max_drawdown,
    calc_rolling_volatility,
    calc_sharpe_ratio,
    calc_sortino_ratio,
    calc_total_return,
    calc_var,
    calc_volatility,
)

__all__ = [
    "TRADING_DAYS_PER_YEAR",
    # Returns
    "calc_daily_returns",
    "calc_total_return",
    "calc_cagr",
    # Risk metrics
    "calc_volatility",
    "calc_sharpe_ratio",
    "calc_sortino_ratio",
    "calc_downside_deviation",
    "calc_beta",
    "calc_max_drawdown",
    "calc_var",
    "calc_rolling_volatility",
    # Co-movement
    "calc_correlation",
]
