"""Base types for the calculation engine."""

from enum import Enum


class SentimentLabel(str, Enum):
    """News sentiment classification."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Momentum(str, Enum):
    """Sector momentum classification."""

    STRONG_UP = "strong_up"
    UP = "up"
    NEUTRAL = "neutral"
    DOWN = "down"
    STRONG_DOWN = "strong_down"


class RotationSignal(str, Enum):
    """Sector rotation recommendation."""

    BUY = "buy"
    ACCUMULATE = "accumulate"
    HOLD = "hold"
    SELL = "sell"


class ComputeError(ValueError):
    """Input rejected before computation (e.g. negative shares)."""

    pass
