"""Price series data models."""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable


class Period(str, Enum):
    """Lookback periods accepted by price providers."""

    ONE_WEEK = "1w"
    ONE_MONTH = "1mo"
    THREE_MONTHS = "3mo"
    SIX_MONTHS = "6mo"
    ONE_YEAR = "1y"
    TWO_YEARS = "2y"
    FIVE_YEARS = "5y"


@dataclass(frozen=True)
class PricePoint:
    """Closing price of one instrument on one trading day."""

    date: date
    close: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"date": self.date.isoformat(), "close": self.close}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PricePoint":
        """Create instance from dictionary."""
        value = data["date"]
        if isinstance(value, str):
            value = date.fromisoformat(value[:10])
        elif isinstance(value, datetime):
            value = value.date()
        return cls(date=value, close=float(data["close"]))


@dataclass
class PriceSeries:
    """Ordered daily closing prices for one instrument.

    Points are kept sorted by date. Duplicate dates are rejected since a
    trading day has exactly one close.

    Attributes:
        symbol: Ticker the series belongs to.
        points: Price points, oldest to newest.
        source: Provider that produced the series.
    """

    symbol: str
    points: list[PricePoint] = field(default_factory=list)
    source: str = "unknown"

    def __post_init__(self) -> None:
        self.points = sorted(self.points, key=lambda p: p.date)
        for prev, cur in zip(self.points, self.points[1:]):
            if prev.date == cur.date:
                raise ValueError(
                    f"Duplicate date {cur.date.isoformat()} in price series for {self.symbol}"
                )

    @classmethod
    def from_pairs(
        cls,
        symbol: str,
        pairs: Iterable[tuple[date, float]],
        source: str = "unknown",
    ) -> "PriceSeries":
        """Build a series from (date, close) pairs."""
        return cls(
            symbol=symbol,
            points=[PricePoint(date=d, close=float(c)) for d, c in pairs],
            source=source,
        )

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def dates(self) -> list[date]:
        return [p.date for p in self.points]

    @property
    def closes(self) -> list[float]:
        return [p.close for p in self.points]

    @property
    def last_date(self) -> date | None:
        return self.points[-1].date if self.points else None

    def as_dict(self) -> dict[date, float]:
        """Map of date to close."""
        return {p.date: p.close for p in self.points}

    def valid_closes(self) -> dict[date, float]:
        """Map of date to close, skipping missing and non-positive closes."""
        return {
            p.date: p.close
            for p in self.points
            if p.close is not None and math.isfinite(p.close) and p.close > 0
        }

    def tail(self, n: int) -> "PriceSeries":
        """Last ``n`` points as a new series."""
        if n <= 0:
            return PriceSeries(symbol=self.symbol, source=self.source)
        return PriceSeries(symbol=self.symbol, points=self.points[-n:], source=self.source)

    def truncate(self, end: date) -> "PriceSeries":
        """Points dated on or before ``end`` as a new series."""
        return PriceSeries(
            symbol=self.symbol,
            points=[p for p in self.points if p.date <= end],
            source=self.source,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "symbol": self.symbol,
            "points": [p.to_dict() for p in self.points],
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PriceSeries":
        """Create instance from dictionary."""
        return cls(
            symbol=data["symbol"],
            points=[PricePoint.from_dict(p) for p in data.get("points", [])],
            source=data.get("source", "unknown"),
        )
