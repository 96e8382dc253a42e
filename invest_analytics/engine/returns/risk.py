"""Return and risk metric calculations.

All functions take plain lists ordered oldest to newest and return plain
floats. Degenerate inputs (empty, constant) yield 0.0 rather than NaN or
infinity.
"""

import math
from datetime import date

import numpy as np

TRADING_DAYS_PER_YEAR = 252

# Dispersion below this is treated as zero (float noise on constant series)
_EPSILON = 1e-12


def calc_daily_returns(values: list[float]) -> list[float]:
    """Calculate simple period-over-period returns.

    Formula: r[t] = value[t] / value[t-1] - 1

    Args:
        values: Prices or portfolio values (oldest to newest).

    Returns:
        List of len(values) - 1 returns. Empty if fewer than 2 values.
    """
    if values is None or len(values) < 2:
        return []
    arr = np.asarray(values, dtype=float)
    return (arr[1:] / arr[:-1] - 1.0).tolist()


def calc_volatility(
    returns: list[float],
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """Calculate annualized volatility.

    Formula: σ_annual = stdev(returns) × sqrt(periods_per_year)

    Uses the population standard deviation.

    Args:
        returns: Periodic returns (as decimals).
        periods_per_year: Number of periods in a year (252 for daily).

    Returns:
        Annualized volatility as a decimal. 0.0 for empty or constant returns.
    """
    if not returns:
        return 0.0
    std_dev = float(np.std(returns))
    if std_dev < _EPSILON:
        return 0.0
    return std_dev * math.sqrt(periods_per_year)


def calc_sharpe_ratio(
    returns: list[float],
    risk_free_rate: float = 0.0,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """Calculate annualized Sharpe ratio.

    Formula: Sharpe = (mean(returns) × periods_per_year - risk_free_rate) / σ_annual

    Args:
        returns: Periodic returns (as decimals).
        risk_free_rate: Annual risk-free rate (as decimal).
        periods_per_year: Number of periods in a year.

    Returns:
        Sharpe ratio. 0.0 when volatility is zero or there is no data.

    Example:
        >>> calc_sharpe_ratio([0.0, 0.0, 0.0])
        0.0
    """
    volatility = calc_volatility(returns, periods_per_year)
    if volatility == 0:
        return 0.0
    annual_return = float(np.mean(returns)) * periods_per_year
    return (annual_return - risk_free_rate) / volatility


def calc_downside_deviation(
    returns: list[float],
    target_return: float = 0.0,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """Calculate annualized downside deviation.

    Only returns below the target contribute.

    Returns:
        Annualized downside deviation. 0.0 if no return falls below target.
    """
    if not returns:
        return 0.0
    arr = np.asarray(returns, dtype=float)
    downside = arr[arr < target_return]
    if len(downside) == 0:
        return 0.0
    variance = float(np.mean((downside - target_return) ** 2))
    return math.sqrt(variance) * math.sqrt(periods_per_year)


def calc_sortino_ratio(
    returns: list[float],
    risk_free_rate: float = 0.0,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """Calculate annualized Sortino ratio.

    Like Sharpe but only penalizes downside volatility.

    Returns:
        Sortino ratio. 0.0 when there is no downside deviation.
    """
    downside = calc_downside_deviation(returns, periods_per_year=periods_per_year)
    if downside < _EPSILON:
        return 0.0
    annual_return = float(np.mean(returns)) * periods_per_year
    return (annual_return - risk_free_rate) / downside


def calc_beta(
    portfolio_returns: list[float],
    benchmark_returns: list[float],
) -> float:
    """Calculate beta relative to a benchmark.

    Formula: Beta = Cov(portfolio, benchmark) / Var(benchmark)

    Both lists must be aligned on the same dates.

    Returns:
        Beta. 0.0 if benchmark variance is zero or fewer than 2 observations.
    """
    n = min(len(portfolio_returns), len(benchmark_returns))
    if n < 2:
        return 0.0
    p = np.asarray(portfolio_returns[:n], dtype=float)
    m = np.asarray(benchmark_returns[:n], dtype=float)

    benchmark_var = float(np.mean((m - m.mean()) ** 2))
    if benchmark_var < _EPSILON**2:
        return 0.0
    covariance = float(np.mean((p - p.mean()) * (m - m.mean())))
    return covariance / benchmark_var


def calc_max_drawdown(equity_curve: list[float]) -> float:
    """Calculate maximum drawdown from an equity curve.

    Max Drawdown = max over t of (running_peak[t] - value[t]) / running_peak[t]

    Args:
        equity_curve: Portfolio values (oldest to newest).

    Returns:
        Maximum drawdown as a positive decimal (e.g., 0.20 for 20% drawdown).
        Returns 0 if equity is monotonically increasing or empty.

    Example:
        >>> equity = [100, 110, 105, 120, 100, 130]
        >>> mdd = calc_max_drawdown(equity)
        >>> abs(mdd - 0.1667) < 0.01  # ~16.67% drawdown from 120 to 100
        True
    """
    if not equity_curve:
        return 0.0

    max_drawdown = 0.0
    peak = equity_curve[0]

    for value in equity_curve:
        if value > peak:
            peak = value
        elif peak > 0:
            drawdown = (peak - value) / peak
            max_drawdown = max(max_drawdown, drawdown)

    return max_drawdown


def calc_var(
    returns: list[float],
    confidence: float = 0.95,
) -> float:
    """Calculate Value at Risk (VaR) using historical simulation.

    Args:
        returns: Periodic returns (as decimals).
        confidence: Confidence level (e.g., 0.95 for 95% VaR).

    Returns:
        VaR as a positive decimal (potential one-period loss). 0.0 if no data.
    """
    if not returns:
        return 0.0
    ordered = sorted(returns)
    index = int(math.floor((1 - confidence) * len(ordered)))
    index = min(max(index, 0), len(ordered) - 1)
    return abs(ordered[index])


def calc_total_return(values: list[float]) -> float:
    """Simple return from first to last value (as decimal)."""
    if not values or len(values) < 2 or values[0] <= 0:
        return 0.0
    return values[-1] / values[0] - 1.0


def calc_cagr(start_value: float, end_value: float, days_elapsed: int) -> float:
    """Calculate compound annual growth rate.

    Formula: CAGR = (end / start) ^ (365 / days_elapsed) - 1

    Returns:
        CAGR as decimal. 0.0 if no time elapsed or values are non-positive.
        ``math.inf`` if annualizing a very short window overflows.
    """
    if days_elapsed <= 0 or start_value <= 0 or end_value <= 0:
        return 0.0
    try:
        return math.exp(math.log(end_value / start_value) * 365.0 / days_elapsed) - 1.0
    except OverflowError:
        return math.inf


def calc_correlation(x: list[float], y: list[float]) -> float:
    """Calculate Pearson correlation of two aligned series.

    Returns:
        Correlation clamped to [-1, 1]. 0.0 if either series is constant
        or fewer than 2 observations.
    """
    n = min(len(x), len(y))
    if n < 2:
        return 0.0
    a = np.asarray(x[:n], dtype=float)
    b = np.asarray(y[:n], dtype=float)
    da = a - a.mean()
    db = b - b.mean()
    denom = math.sqrt(float(np.sum(da * da)) * float(np.sum(db * db)))
    if denom < _EPSILON:
        return 0.0
    corr = float(np.sum(da * db)) / denom
    return max(-1.0, min(1.0, corr))


def calc_rolling_volatility(
    dates: list[date],
    values: list[float],
    window: int = 30,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> list[tuple[date, float]]:
    """Calculate rolling annualized volatility.

    Each point uses the ``window`` values preceding its date.

    Returns:
        List of (date, volatility as decimal). Empty if not enough data.
    """
    result = []
    for i in range(window, len(values)):
        returns = calc_daily_returns(values[i - window:i])
        result.append((dates[i], calc_volatility(returns, periods_per_year)))
    return result
