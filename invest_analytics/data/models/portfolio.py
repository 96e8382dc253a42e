"""Portfolio holding model."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PortfolioHolding:
    """A single position in a portfolio.

    Attributes:
        ticker: Stock symbol.
        shares: Number of shares held (must be positive).
        avg_cost: Average cost per share (must be non-negative).
    """

    ticker: str
    shares: float
    avg_cost: float = 0.0

    @property
    def cost_basis(self) -> float:
        return self.shares * self.avg_cost

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"ticker": self.ticker, "shares": self.shares, "avgCost": self.avg_cost}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PortfolioHolding":
        """Create instance from dictionary.

        Accepts both ``avgCost`` and ``avg_cost`` keys.
        """
        avg_cost = data.get("avgCost", data.get("avg_cost", 0.0))
        return cls(
            ticker=str(data["ticker"]),
            shares=float(data["shares"]),
            avg_cost=float(avg_cost),
        )
