"""Sector rotation analysis.

Ranks sectors by relative strength against a benchmark, classifies their
momentum and maps both onto a rotation signal.
"""

import logging
from datetime import date

from invest_analytics.data.models import PriceSeries
from invest_analytics.engine.base import Momentum, RotationSignal
from invest_analytics.engine.models import (
    SectorPerformance,
    SectorRotationResult,
    SectorSnapshot,
)
from invest_analytics.engine.sector.correlation import build_correlation_matrix

logger = logging.getLogger(__name__)

# Trailing window sizes in price points
WINDOW_ONE_WEEK = 5
WINDOW_ONE_MONTH = 21
WINDOW_THREE_MONTH = 63
WINDOW_SIX_MONTH = 126
WINDOW_ONE_YEAR = 252

DEFAULT_STRONG_THRESHOLD = 10.0  # percent, on the 3-month return

# (relative strength direction, momentum) -> signal; unlisted pairs are HOLD
DEFAULT_SIGNAL_POLICY: dict[tuple[str, Momentum], RotationSignal] = {
    ("positive", Momentum.STRONG_UP): RotationSignal.BUY,
    ("positive", Momentum.UP): RotationSignal.ACCUMULATE,
    ("negative", Momentum.DOWN): RotationSignal.SELL,
    ("negative", Momentum.STRONG_DOWN): RotationSignal.SELL,
}

# SPDR sector ETFs used as sector proxies
SECTOR_ETFS: dict[str, str] = {
    "Technology": "XLK",
    "Healthcare": "XLV",
    "Financials": "XLF",
    "Energy": "XLE",
    "Consumer Discretionary": "XLY",
    "Consumer Staples": "XLP",
    "Industrials": "XLI",
    "Materials": "XLB",
    "Utilities": "XLU",
    "Real Estate": "XLRE",
    "Communication Services": "XLC",
}


def calc_period_return(prices: list[float]) -> float:
    """Simple return from first to last price, in percent.

    Returns:
        Percent return. 0.0 if fewer than 2 prices.
    """
    if len(prices) < 2 or prices[0] <= 0:
        return 0.0
    return (prices[-1] - prices[0]) / prices[0] * 100


def calc_performance(closes: list[float]) -> SectorPerformance:
    """Trailing 1w / 1m / 3m / 6m / 1y returns of a close series."""
    return SectorPerformance(
        one_week=calc_period_return(closes[-WINDOW_ONE_WEEK:]),
        one_month=calc_period_return(closes[-WINDOW_ONE_MONTH:]),
        three_month=calc_period_return(closes[-WINDOW_THREE_MONTH:]),
        six_month=calc_period_return(closes[-WINDOW_SIX_MONTH:]),
        one_year=calc_period_return(closes[-WINDOW_ONE_YEAR:]),
    )


def calc_relative_strength(sector_return: float, benchmark_return: float) -> float:
    """Sector return minus benchmark return, in percentage points.

    Positive = outperforming, Negative = underperforming.
    """
    return sector_return - benchmark_return


def classify_momentum(
    one_week: float,
    one_month: float,
    three_month: float,
    strong_threshold: float = DEFAULT_STRONG_THRESHOLD,
) -> Momentum:
    """Classify momentum from trailing returns (percent).

    All three positive is UP; it is STRONG_UP when returns also grow with the
    window length and the 3-month return reaches ``strong_threshold``. The
    negative side mirrors this. Mixed signs are NEUTRAL.

    Example:
        >>> classify_momentum(2.0, 5.0, 12.0)
        <Momentum.STRONG_UP: 'strong_up'>
    """
    returns = (one_week, one_month, three_month)

    if all(r > 0 for r in returns):
        increasing = one_week <= one_month <= three_month
        if increasing and three_month >= strong_threshold:
            return Momentum.STRONG_UP
        return Momentum.UP

    if all(r < 0 for r in returns):
        decreasing = one_week >= one_month >= three_month
        if decreasing and three_month <= -strong_threshold:
            return Momentum.STRONG_DOWN
        return Momentum.DOWN

    return Momentum.NEUTRAL


def determine_signal(
    relative_strength: float,
    momentum: Momentum,
    policy: dict[tuple[str, Momentum], RotationSignal] | None = None,
) -> RotationSignal:
    """Look up the rotation signal for a relative strength / momentum pair."""
    policy = policy if policy is not None else DEFAULT_SIGNAL_POLICY
    if relative_strength > 0:
        direction = "positive"
    elif relative_strength < 0:
        direction = "negative"
    else:
        direction = "flat"
    return policy.get((direction, momentum), RotationSignal.HOLD)


def common_end_date(series: PriceSeries, benchmark: PriceSeries) -> date | None:
    """Latest date on which both series have a valid close."""
    common = set(series.valid_closes()) & set(benchmark.valid_closes())
    return max(common) if common else None


class SectorRotationEngine:
    """Produces ranked sector snapshots and their correlation matrix.

    Usage:
        engine = SectorRotationEngine(strong_threshold=10.0)
        result = engine.analyze({"Technology": xlk}, benchmark=spx)
    """

    def __init__(
        self,
        strong_threshold: float = DEFAULT_STRONG_THRESHOLD,
        signal_policy: dict[tuple[str, Momentum], RotationSignal] | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            strong_threshold: 3-month return (percent) separating strong momentum.
            signal_policy: Rotation signal table; defaults to DEFAULT_SIGNAL_POLICY.
        """
        self.strong_threshold = strong_threshold
        self.signal_policy = signal_policy or dict(DEFAULT_SIGNAL_POLICY)

    def snapshot(
        self,
        sector: str,
        series: PriceSeries,
        benchmark: PriceSeries,
        ticker: str | None = None,
    ) -> SectorSnapshot | None:
        """Build the snapshot of one sector.

        Both series are cut at their latest shared date before trailing
        returns are taken. The benchmark 3-month return covers the same dates
        as the sector's 3-month window.

        Returns:
            SectorSnapshot, or None if the sector and benchmark share no date.
        """
        end = common_end_date(series, benchmark)
        if end is None:
            return None
        sector_closes = series.valid_closes()
        bench_closes = benchmark.valid_closes()

        sector_points = [(d, c) for d, c in sorted(sector_closes.items()) if d <= end]
        closes = [c for _, c in sector_points]
        window_start = sector_points[-WINDOW_THREE_MONTH:][0][0]
        bench = [c for d, c in sorted(bench_closes.items()) if window_start <= d <= end]

        performance = calc_performance(closes)
        bench_3m = calc_period_return(bench)
        relative_strength = calc_relative_strength(performance.three_month, bench_3m)
        momentum = classify_momentum(
            performance.one_week,
            performance.one_month,
            performance.three_month,
            self.strong_threshold,
        )

        return SectorSnapshot(
            sector=sector,
            ticker=ticker or series.symbol,
            relative_strength=relative_strength,
            momentum=momentum,
            performance=performance,
            signal=determine_signal(relative_strength, momentum, self.signal_policy),
            price=closes[-1],
        )

    def analyze(
        self,
        sector_series: dict[str, PriceSeries],
        benchmark: PriceSeries,
        tickers: dict[str, str] | None = None,
    ) -> SectorRotationResult:
        """Analyze sector rotation against a benchmark.

        Args:
            sector_series: Price series keyed by sector name.
            benchmark: Benchmark price series.
            tickers: Optional sector name → proxy ticker mapping.

        Returns:
            SectorRotationResult with snapshots ranked by relative strength
            (strongest first). Sectors without data overlapping the benchmark
            are listed in ``missing_sectors``.
        """
        tickers = tickers or {}
        snapshots: list[SectorSnapshot] = []
        missing: list[str] = []

        for sector, series in sector_series.items():
            snap = self.snapshot(sector, series, benchmark, tickers.get(sector))
            if snap is None:
                logger.warning(f"No data overlapping benchmark for sector {sector}")
                missing.append(sector)
                continue
            snapshots.append(snap)

        snapshots.sort(key=lambda s: s.relative_strength, reverse=True)
        for rank, snap in enumerate(snapshots, start=1):
            snap.rank = rank

        available = {s.sector: sector_series[s.sector] for s in snapshots}

        # Benchmark performance uses the same cut as the snapshots
        ends = [common_end_date(series, benchmark) for series in available.values()]
        as_of = max(ends) if ends else benchmark.last_date
        bench_closes = [
            c for d, c in sorted(benchmark.valid_closes().items()) if as_of is None or d <= as_of
        ]

        return SectorRotationResult(
            snapshots=snapshots,
            correlation=build_correlation_matrix(available),
            benchmark=benchmark.symbol,
            benchmark_performance=calc_performance(bench_closes),
            as_of=as_of,
            missing_sectors=missing,
        )
