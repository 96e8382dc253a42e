"""Portfolio risk metrics calculations.

Portfolio-level module that turns per-holding price history into
risk/return statistics.
"""

import logging
import math
from datetime import date

from invest_analytics.data.models import PortfolioHolding, PriceSeries
from invest_analytics.engine.base import ComputeError
from invest_analytics.engine.models import RiskMetrics
from invest_analytics.engine.returns import (
    TRADING_DAYS_PER_YEAR,
    calc_beta,
    calc_cagr,
    calc_daily_returns,
    calc_downside_deviation,
    calc_max_drawdown,
    calc_rolling_volatility,
    calc_sharpe_ratio,
    calc_sortino_ratio,
    calc_var,
    calc_volatility,
)

logger = logging.getLogger(__name__)

DEFAULT_RISK_FREE_RATE = 0.045  # 10-year Treasury


def validate_holdings(holdings: list[PortfolioHolding]) -> None:
    """Reject malformed holdings before any computation.

    Raises:
        ComputeError: Empty or duplicate ticker, non-positive shares,
            negative or non-finite average cost.
    """
    seen: set[str] = set()
    for holding in holdings:
        ticker = (holding.ticker or "").strip().upper()
        if not ticker:
            raise ComputeError("Holding ticker is required")
        if ticker in seen:
            raise ComputeError(f"Duplicate holding for {ticker}")
        seen.add(ticker)
        if not math.isfinite(holding.shares) or holding.shares <= 0:
            raise ComputeError(f"Shares for {ticker} must be positive, got {holding.shares}")
        if not math.isfinite(holding.avg_cost) or holding.avg_cost < 0:
            raise ComputeError(
                f"Average cost for {ticker} must be non-negative, got {holding.avg_cost}"
            )


def _valid_closes(series: PriceSeries | None) -> dict[date, float]:
    return series.valid_closes() if series is not None else {}


def build_portfolio_value_series(
    holdings: list[PortfolioHolding],
    prices: dict[str, PriceSeries],
) -> tuple[list[date], list[float]]:
    """Build the daily portfolio value series.

    Formula: value[t] = Σ shares × price[ticker][t]

    Only dates with a valid close for every holding are kept (inner join).

    Args:
        holdings: Portfolio holdings.
        prices: Price series keyed by ticker.

    Returns:
        (dates, values), oldest to newest. Empty lists if no holdings or no
        common date.
    """
    if not holdings:
        return [], []

    closes = [_valid_closes(prices.get(h.ticker)) for h in holdings]
    common = set(closes[0])
    for c in closes[1:]:
        common &= set(c)

    dates = sorted(common)
    values = [
        sum(h.shares * c[d] for h, c in zip(holdings, closes))
        for d in dates
    ]
    return dates, values


def _aligned_benchmark_returns(
    dates: list[date],
    values: list[float],
    benchmark: PriceSeries | None,
) -> tuple[list[float], list[float]]:
    """Portfolio and benchmark returns over their shared dates."""
    bench = _valid_closes(benchmark)
    shared = [(v, bench[d]) for d, v in zip(dates, values) if d in bench]
    if len(shared) < 2:
        return [], []
    portfolio_vals, bench_vals = zip(*shared)
    return calc_daily_returns(list(portfolio_vals)), calc_daily_returns(list(bench_vals))


class RiskMetricsEngine:
    """Computes portfolio-level risk/return statistics.

    Stateless apart from its conventions, so one instance can serve
    concurrent requests.

    Usage:
        engine = RiskMetricsEngine(risk_free_rate=0.045)
        metrics = engine.compute(holdings, prices, benchmark)
    """

    def __init__(
        self,
        risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
        trading_days: int = TRADING_DAYS_PER_YEAR,
        rolling_window: int = 30,
    ) -> None:
        """Initialize engine.

        Args:
            risk_free_rate: Annual risk-free rate used by Sharpe and Sortino.
            trading_days: Trading days per year for annualization.
            rolling_window: Window for the rolling volatility history.
        """
        self.risk_free_rate = risk_free_rate
        self.trading_days = trading_days
        self.rolling_window = rolling_window

    def compute(
        self,
        holdings: list[PortfolioHolding],
        prices: dict[str, PriceSeries],
        benchmark: PriceSeries | None = None,
    ) -> RiskMetrics:
        """Compute risk metrics for a portfolio.

        Args:
            holdings: Portfolio holdings (unique tickers).
            prices: Price series keyed by holding ticker.
            benchmark: Benchmark series for beta.

        Returns:
            RiskMetrics. Zeroed when the portfolio is empty or its holdings
            share no trading date.

        Raises:
            ComputeError: Holdings fail validation.
        """
        validate_holdings(holdings)

        cost_basis = sum(h.cost_basis for h in holdings)
        dates, values = build_portfolio_value_series(holdings, prices)
        if not values:
            if holdings:
                logger.warning(
                    f"No common trading dates across {[h.ticker for h in holdings]}"
                )
            return RiskMetrics(cost_basis=cost_basis)

        returns = calc_daily_returns(values)
        volatility = calc_volatility(returns, self.trading_days)
        mdd = calc_max_drawdown(values)

        portfolio_returns, benchmark_returns = _aligned_benchmark_returns(
            dates, values, benchmark
        )

        total_return = values[-1] - values[0]
        ratio = values[-1] / values[0] - 1.0
        days_elapsed = (dates[-1] - dates[0]).days

        return RiskMetrics(
            volatility=volatility,
            sharpe_ratio=calc_sharpe_ratio(returns, self.risk_free_rate, self.trading_days),
            beta=calc_beta(portfolio_returns, benchmark_returns),
            max_drawdown=-mdd if mdd > 0 else 0.0,
            total_return=total_return,
            total_return_percent=ratio * 100,
            cagr=calc_cagr(values[0], values[-1], days_elapsed),
            sortino_ratio=calc_sortino_ratio(returns, self.risk_free_rate, self.trading_days),
            downside_deviation=calc_downside_deviation(
                returns, periods_per_year=self.trading_days
            ),
            value_at_risk_95=calc_var(returns, 0.95),
            value_at_risk_99=calc_var(returns, 0.99),
            market_value=values[-1],
            cost_basis=cost_basis,
            unrealized_pnl=values[-1] - cost_basis,
            data_points=len(values),
            start_date=dates[0],
            end_date=dates[-1],
            volatility_history=calc_rolling_volatility(
                dates, values, self.rolling_window, self.trading_days
            ),
        )
