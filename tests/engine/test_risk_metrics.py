"""Tests for portfolio risk metrics."""

import math
from datetime import date

import pytest

from invest_analytics.data.models import PortfolioHolding, PriceSeries
from invest_analytics.engine.base import ComputeError
from invest_analytics.engine.portfolio import (
    RiskMetricsEngine,
    build_portfolio_value_series,
    validate_holdings,
)
from invest_analytics.engine.returns import calc_daily_returns, calc_sharpe_ratio


@pytest.fixture
def engine():
    return RiskMetricsEngine(risk_free_rate=0.045)


class TestValidation:
    """Tests for holding validation."""

    @pytest.mark.parametrize(
        "holding",
        [
            PortfolioHolding("AAPL", -1),
            PortfolioHolding("AAPL", 0),
            PortfolioHolding("AAPL", float("nan")),
            PortfolioHolding("AAPL", 10, -5.0),
            PortfolioHolding("AAPL", 10, float("inf")),
            PortfolioHolding("  ", 10),
        ],
    )
    def test_invalid_holding_rejected(self, engine, holding):
        """Test malformed holdings raise before computing."""
        with pytest.raises(ComputeError):
            engine.compute([holding], {})

    def test_duplicate_tickers_rejected(self):
        """Test duplicate tickers are rejected case-insensitively."""
        with pytest.raises(ComputeError, match="Duplicate"):
            validate_holdings([PortfolioHolding("AAPL", 1), PortfolioHolding("aapl", 2)])

    def test_compute_error_is_value_error(self):
        """Test ComputeError reads as a validation failure."""
        assert issubclass(ComputeError, ValueError)


class TestPortfolioValueSeries:
    """Tests for the portfolio value series."""

    def test_inner_join_on_dates(self, make_series):
        """Test a date missing from one holding is dropped for the portfolio."""
        aapl = make_series("AAPL", [100, 101, 102, 103, 104])
        msft = PriceSeries.from_pairs(
            "MSFT",
            [(d, 50.0) for i, d in enumerate(aapl.dates) if i != 2],
        )
        holdings = [PortfolioHolding("AAPL", 10), PortfolioHolding("MSFT", 2)]

        dates, values = build_portfolio_value_series(holdings, {"AAPL": aapl, "MSFT": msft})

        assert len(dates) == 4
        assert aapl.dates[2] not in dates
        assert values[0] == 10 * 100 + 2 * 50

    def test_non_positive_close_excludes_date(self, make_series):
        """Test zero and missing closes are unavailable dates, not errors."""
        aapl = make_series("AAPL", [100, 0, float("nan"), 103])
        dates, values = build_portfolio_value_series([PortfolioHolding("AAPL", 1)], {"AAPL": aapl})
        assert values == [100, 103]

    def test_missing_series(self):
        """Test a holding without series leaves no common dates."""
        dates, values = build_portfolio_value_series([PortfolioHolding("AAPL", 1)], {})
        assert dates == [] and values == []


class TestRiskMetricsEngine:
    """Tests for RiskMetricsEngine.compute."""

    def test_empty_portfolio_is_zeroed(self, engine, check_finite):
        """Test an empty portfolio returns zeroed metrics, not an error."""
        metrics = engine.compute([], {})

        assert metrics.is_empty
        assert metrics.volatility == 0.0
        assert metrics.sharpe_ratio == 0.0
        assert metrics.beta == 0.0
        assert metrics.max_drawdown == 0.0
        assert metrics.cagr == 0.0
        check_finite(metrics.to_dict())

    def test_disjoint_dates_are_zeroed(self, engine, make_series, check_finite):
        """Test holdings with no common date give zeroed metrics."""
        aapl = make_series("AAPL", [100, 101], start=date(2024, 1, 1))
        msft = make_series("MSFT", [50, 51], start=date(2024, 3, 1))
        holdings = [PortfolioHolding("AAPL", 1, 90.0), PortfolioHolding("MSFT", 1, 40.0)]

        metrics = engine.compute(holdings, {"AAPL": aapl, "MSFT": msft})

        assert metrics.is_empty
        assert metrics.cost_basis == 130.0
        check_finite(metrics.to_dict())

    def test_single_day_has_no_returns(self, engine, make_series, check_finite):
        """Test one observation yields defined zero statistics."""
        metrics = engine.compute(
            [PortfolioHolding("AAPL", 10, 90.0)], {"AAPL": make_series("AAPL", [100])}
        )

        assert metrics.data_points == 1
        assert metrics.volatility == 0.0
        assert metrics.cagr == 0.0
        assert metrics.market_value == 1000.0
        assert metrics.unrealized_pnl == 100.0
        check_finite(metrics.to_dict())

    def test_constant_prices(self, engine, make_series):
        """Test constant prices have zero risk and zero Sharpe."""
        metrics = engine.compute(
            [PortfolioHolding("AAPL", 5)], {"AAPL": make_series("AAPL", [100.0] * 10)}
        )

        assert metrics.volatility == 0.0
        assert metrics.sharpe_ratio == 0.0
        assert metrics.max_drawdown == 0.0
        assert metrics.total_return == 0.0

    def test_sharpe_matches_formula(self, engine, make_series):
        """Test Sharpe uses annualized mean return less the risk-free rate."""
        closes = [100, 102, 101, 104, 103, 107, 106, 110]
        metrics = engine.compute(
            [PortfolioHolding("AAPL", 3)], {"AAPL": make_series("AAPL", closes)}
        )

        values = [3 * c for c in closes]
        expected = calc_sharpe_ratio(calc_daily_returns(values), 0.045)
        assert metrics.sharpe_ratio == pytest.approx(expected)
        assert metrics.volatility > 0

    def test_beta_against_itself_is_one(self, engine, make_series):
        """Test a portfolio equal to the benchmark has beta 1."""
        closes = [100, 102, 99, 103, 101, 105]
        spx = make_series("^GSPC", closes)
        metrics = engine.compute(
            [PortfolioHolding("SPY", 2)], {"SPY": make_series("SPY", closes)}, spx
        )
        assert metrics.beta == pytest.approx(1.0)

    def test_beta_uses_common_dates(self, engine, make_series):
        """Test beta aligns portfolio and benchmark on shared dates."""
        closes = [100, 102, 99, 103, 101, 105]
        portfolio = make_series("SPY", closes)
        benchmark = PriceSeries.from_pairs(
            "^GSPC", [(d, c) for d, c in zip(portfolio.dates, closes) if d != portfolio.dates[3]]
        )

        metrics = engine.compute([PortfolioHolding("SPY", 1)], {"SPY": portfolio}, benchmark)

        assert metrics.beta == pytest.approx(1.0)

    def test_no_benchmark_beta_zero(self, engine, make_series):
        """Test beta is zero without a benchmark."""
        metrics = engine.compute(
            [PortfolioHolding("AAPL", 1)], {"AAPL": make_series("AAPL", [100, 101, 99])}
        )
        assert metrics.beta == 0.0

    def test_max_drawdown_negative_percent(self, engine, make_series):
        """Test max drawdown is reported as a non-positive percentage."""
        metrics = engine.compute(
            [PortfolioHolding("AAPL", 1)], {"AAPL": make_series("AAPL", [100, 120, 90, 130])}
        )

        assert metrics.max_drawdown == pytest.approx(-0.25)
        assert metrics.to_dict()["maxDrawdown"] == -25.0

    def test_total_return_and_cagr(self, engine, make_series):
        """Test currency and percent total return, and CAGR over elapsed days."""
        aapl = PriceSeries.from_pairs("AAPL", [(date(2023, 1, 1), 100.0), (date(2024, 1, 1), 110.0)])

        metrics = engine.compute([PortfolioHolding("AAPL", 10, 95.0)], {"AAPL": aapl})

        assert metrics.total_return == pytest.approx(100.0)
        assert metrics.total_return_percent == pytest.approx(10.0)
        assert metrics.cagr == pytest.approx(0.10)
        assert metrics.market_value == pytest.approx(1100.0)
        assert metrics.cost_basis == pytest.approx(950.0)
        assert metrics.unrealized_pnl == pytest.approx(150.0)
        assert metrics.start_date == date(2023, 1, 1)
        assert metrics.end_date == date(2024, 1, 1)

    def test_flat_benchmark_scenario(self, engine, make_series):
        """Test a four-day holding against a flat benchmark."""
        metrics = engine.compute(
            [PortfolioHolding("AAPL", 10, 100.0)],
            {"AAPL": make_series("AAPL", [100, 110, 99, 121])},
            make_series("^GSPC", [100, 100, 100, 100]),
        )
        bundle = metrics.to_dict()

        assert bundle["totalReturnPercent"] == 21.0
        assert bundle["maxDrawdown"] == -10.0
        assert bundle["beta"] == 0.0

    def test_rising_value_has_no_drawdown(self, engine, make_series):
        """Test a monotonically increasing portfolio never draws down."""
        metrics = engine.compute(
            [PortfolioHolding("AAPL", 1)], {"AAPL": make_series("AAPL", [100, 101, 103, 108])}
        )
        assert metrics.max_drawdown == 0.0

    def test_rolling_volatility_history(self, make_series, make_growth):
        """Test the rolling window length is configurable."""
        closes = make_growth(0.001, count=40, wiggle=0.01)
        engine = RiskMetricsEngine(rolling_window=30)

        metrics = engine.compute([PortfolioHolding("AAPL", 1)], {"AAPL": make_series("AAPL", closes)})

        assert len(metrics.volatility_history) == 10
        assert len(metrics.to_dict()["volatilityHistory"]) == 10

    def test_value_at_risk(self, engine, make_series, make_growth):
        """Test VaR is a non-negative loss with 99% at least as large as 95%."""
        closes = make_growth(0.0, count=60, wiggle=0.02)
        metrics = engine.compute([PortfolioHolding("AAPL", 1)], {"AAPL": make_series("AAPL", closes)})

        assert metrics.value_at_risk_95 > 0
        assert metrics.value_at_risk_99 >= metrics.value_at_risk_95

    def test_bundle_rounding(self, engine, make_series):
        """Test bundle fields are camelCase and rounded to two decimals."""
        metrics = engine.compute(
            [PortfolioHolding("AAPL", 3, 33.333)],
            {"AAPL": make_series("AAPL", [100, 102.345, 101.111, 104.789])},
        )
        bundle = metrics.to_dict()

        for key in ("volatility", "sharpeRatio", "beta", "maxDrawdown", "totalReturnPercent", "cagr"):
            assert key in bundle
        assert bundle["volatility"] == round(metrics.volatility * 100, 2)
        assert bundle["sharpeRatio"] == round(metrics.sharpe_ratio, 2)
        assert bundle["costBasis"] == 100.0
        assert all(
            math.isfinite(v) for v in bundle.values() if isinstance(v, float)
        )
