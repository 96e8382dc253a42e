"""Engine result models.

Results keep raw values internally. ``to_dict`` renders the JSON bundle
consumed by the presentation layer: camelCase keys, percentages and prices
rounded to two decimals.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from invest_analytics.engine.base import Momentum, RotationSignal, SentimentLabel


def _round(value: float | None, digits: int = 2) -> float | None:
    """Round for display; non-finite values become None."""
    if value is None or not math.isfinite(value):
        return None
    return round(value, digits)


def _pct(value: float | None) -> float | None:
    """Decimal to rounded percentage."""
    if value is None:
        return None
    return _round(value * 100)


@dataclass
class RiskMetrics:
    """Portfolio risk/return statistics.

    Decimal fields (``volatility``, ``max_drawdown``, ``cagr``, VaR,
    ``downside_deviation``) are rendered as percentages. ``max_drawdown`` is
    zero or negative. ``total_return`` is the change in portfolio value;
    ``total_return_percent`` is already a percentage.
    """

    volatility: float = 0.0
    sharpe_ratio: float = 0.0
    beta: float = 0.0
    max_drawdown: float = 0.0
    total_return: float = 0.0
    total_return_percent: float = 0.0
    cagr: float = 0.0
    sortino_ratio: float = 0.0
    downside_deviation: float = 0.0
    value_at_risk_95: float = 0.0
    value_at_risk_99: float = 0.0
    market_value: float = 0.0
    cost_basis: float = 0.0
    unrealized_pnl: float = 0.0
    data_points: int = 0
    start_date: date | None = None
    end_date: date | None = None
    volatility_history: list[tuple[date, float]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.data_points == 0

    def to_dict(self) -> dict[str, Any]:
        """Render the risk metrics bundle."""
        return {
            "volatility": _pct(self.volatility),
            "sharpeRatio": _round(self.sharpe_ratio),
            "beta": _round(self.beta),
            "maxDrawdown": _pct(self.max_drawdown),
            "totalReturn": _round(self.total_return),
            "totalReturnPercent": _round(self.total_return_percent),
            "cagr": _pct(self.cagr),
            "sortinoRatio": _round(self.sortino_ratio),
            "downsideDeviation": _pct(self.downside_deviation),
            "valueAtRisk95": _pct(self.value_at_risk_95),
            "valueAtRisk99": _pct(self.value_at_risk_99),
            "marketValue": _round(self.market_value),
            "costBasis": _round(self.cost_basis),
            "unrealizedPnl": _round(self.unrealized_pnl),
            "dataPoints": self.data_points,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "volatilityHistory": [
                {"date": d.isoformat(), "volatility": _pct(v)}
                for d, v in self.volatility_history
            ],
        }


@dataclass
class SectorPerformance:
    """Trailing returns in percent."""

    one_week: float = 0.0
    one_month: float = 0.0
    three_month: float = 0.0
    six_month: float = 0.0
    one_year: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "oneWeek": _round(self.one_week),
            "oneMonth": _round(self.one_month),
            "threeMonth": _round(self.three_month),
            "sixMonth": _round(self.six_month),
            "oneYear": _round(self.one_year),
        }


@dataclass
class SectorSnapshot:
    """Rotation view of one sector.

    Attributes:
        sector: Sector name.
        ticker: Symbol used as the sector proxy (e.g. an ETF).
        relative_strength: 3-month return minus benchmark 3-month return (pp).
        momentum: Momentum classification.
        performance: Trailing returns.
        signal: Rotation recommendation.
        rank: 1 for the strongest relative strength.
        price: Latest close.
    """

    sector: str
    ticker: str
    relative_strength: float
    momentum: Momentum
    performance: SectorPerformance
    signal: RotationSignal = RotationSignal.HOLD
    rank: int = 0
    price: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sector": self.sector,
            "ticker": self.ticker,
            "relativeStrength": _round(self.relative_strength),
            "momentum": self.momentum.value,
            "performance": self.performance.to_dict(),
            "signal": self.signal.value,
            "rank": self.rank,
            "price": _round(self.price),
        }


@dataclass
class CorrelationMatrix:
    """Symmetric sector × sector correlation coefficients."""

    sectors: list[str]
    values: dict[str, dict[str, float]]

    def get(self, a: str, b: str) -> float:
        return self.values[a][b]

    def to_dict(self) -> dict[str, Any]:
        return {
            "sectors": list(self.sectors),
            "matrix": {
                a: {b: _round(v, 4) for b, v in row.items()} for a, row in self.values.items()
            },
        }


@dataclass
class SectorRotationResult:
    """Ranked sector snapshots plus their correlation matrix."""

    snapshots: list[SectorSnapshot]
    correlation: CorrelationMatrix
    benchmark: str
    benchmark_performance: SectorPerformance
    as_of: date | None = None
    missing_sectors: list[str] = field(default_factory=list)

    def top(self, count: int = 3) -> list[SectorSnapshot]:
        """Strongest sectors by relative strength."""
        return self.snapshots[:count]

    def bottom(self, count: int = 3) -> list[SectorSnapshot]:
        """Weakest sectors, weakest first."""
        if count <= 0:
            return []
        return list(reversed(self.snapshots[-count:]))

    def to_dict(self) -> dict[str, Any]:
        return {
            "sectors": [s.to_dict() for s in self.snapshots],
            "correlation": self.correlation.to_dict(),
            "benchmark": self.benchmark,
            "benchmarkPerformance": self.benchmark_performance.to_dict(),
            "asOf": self.as_of.isoformat() if self.as_of else None,
            "missingSectors": list(self.missing_sectors),
        }


@dataclass
class SentimentScore:
    """Sentiment of one piece of text.

    Attributes:
        score: Summed polarity clamped to [-5, 5].
        comparative: Unclamped polarity per token.
        label: Classification of the score.
        confidence: 0-100, proportional to |score|.
        positive_words: Tokens that contributed positively.
        negative_words: Tokens that contributed negatively.
    """

    score: float
    comparative: float
    label: SentimentLabel
    confidence: int
    positive_words: list[str] = field(default_factory=list)
    negative_words: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": _round(self.score),
            "comparative": _round(self.comparative, 4),
            "label": self.label.value,
            "confidence": self.confidence,
            "positive": list(self.positive_words),
            "negative": list(self.negative_words),
        }


@dataclass
class AggregateSentiment:
    """Summary of sentiment across many articles."""

    average_score: float = 0.0
    label: SentimentLabel = SentimentLabel.NEUTRAL
    bullish_count: int = 0
    bearish_count: int = 0
    neutral_count: int = 0

    @property
    def total(self) -> int:
        return self.bullish_count + self.bearish_count + self.neutral_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "averageScore": _round(self.average_score),
            "label": self.label.value,
            "bullishCount": self.bullish_count,
            "bearishCount": self.bearish_count,
            "neutralCount": self.neutral_count,
        }
