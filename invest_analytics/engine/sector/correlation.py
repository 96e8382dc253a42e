"""Sector return correlation."""

from invest_analytics.data.models import PriceSeries
from invest_analytics.engine.models import CorrelationMatrix
from invest_analytics.engine.returns import calc_correlation, calc_daily_returns


def calc_pairwise_correlation(a: PriceSeries, b: PriceSeries) -> float:
    """Pearson correlation of daily returns over the dates both series share.

    Returns are taken between consecutive shared dates, so each pair is
    aligned independently of any other sector.

    Returns:
        Correlation in [-1, 1]. 0.0 for constant or too-short overlaps.
    """
    closes_a = a.valid_closes()
    closes_b = b.valid_closes()
    common = sorted(set(closes_a) & set(closes_b))
    returns_a = calc_daily_returns([closes_a[d] for d in common])
    returns_b = calc_daily_returns([closes_b[d] for d in common])
    return calc_correlation(returns_a, returns_b)


def build_correlation_matrix(series: dict[str, PriceSeries]) -> CorrelationMatrix:
    """Build the symmetric sector × sector correlation matrix.

    The diagonal is exactly 1.0. Each off-diagonal cell is computed once and
    mirrored.
    """
    names = list(series)
    values: dict[str, dict[str, float]] = {name: {} for name in names}

    for i, a in enumerate(names):
        values[a][a] = 1.0
        for b in names[i + 1:]:
            corr = calc_pairwise_correlation(series[a], series[b])
            values[a][b] = corr
            values[b][a] = corr

    return CorrelationMatrix(sectors=names, values=values)
