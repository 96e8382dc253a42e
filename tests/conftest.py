"""
Shared pytest fixtures.

Provides an in-memory cache backend, price series builders and fake
providers so tests run without Redis or network access.
"""

import fnmatch
import math
import time
from datetime import date, timedelta
from threading import Lock

import pytest

from invest_analytics.data.cache import CacheStore, CacheUnavailable
from invest_analytics.data.models import NewsArticle, Period, PriceSeries
from invest_analytics.data.providers import DataUnavailable, NewsProvider, PriceProvider


# ============================================================================
# Cache Backends
# ============================================================================


class InMemoryBackend:
    """Dict-backed store honoring the CacheBackend contract.

    TTLs are recorded but not enforced.
    """

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self.data.get(key)

    def set_with_ttl(self, key: str, data: str, seconds: int) -> bool:
        with self._lock:
            self.data[key] = data
            self.ttls[key] = seconds
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            self.ttls.pop(key, None)
            return self.data.pop(key, None) is not None

    def keys_matching(self, pattern: str) -> list[str]:
        with self._lock:
            return [k for k in self.data if fnmatch.fnmatchcase(k, pattern)]

    def delete_many(self, keys: list[str]) -> int:
        return sum(1 for k in keys if self.delete(k))

    def ping(self) -> bool:
        return True


class UnreachableBackend:
    """Backend whose store is down."""

    def _down(self, *args, **kwargs):
        raise CacheUnavailable("connection refused")

    get = set_with_ttl = delete = keys_matching = delete_many = ping = _down


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(backend):
    """Cache store over the in-memory backend."""
    cache = CacheStore(backend)
    yield cache
    cache.close()


@pytest.fixture
def down_store():
    """Cache store whose backing store is unreachable."""
    cache = CacheStore(UnreachableBackend())
    yield cache
    cache.close()


# ============================================================================
# Price Series
# ============================================================================


START_DATE = date(2024, 1, 1)


def build_series(
    symbol: str,
    closes: list[float],
    start: date = START_DATE,
) -> PriceSeries:
    """Series with one close per calendar day starting at ``start``."""
    return PriceSeries.from_pairs(
        symbol,
        [(start + timedelta(days=i), c) for i, c in enumerate(closes)],
        source="test",
    )


def growth_closes(
    rate: float,
    count: int = 100,
    base: float = 100.0,
    wiggle: float = 0.0,
) -> list[float]:
    """Geometric growth path with an optional alternating wiggle.

    The wiggle cancels over odd-length windows, so trailing returns match the
    pure growth path.
    """
    return [base * (1 + rate) ** i * (1 + wiggle * (-1) ** i) for i in range(count)]


@pytest.fixture
def make_series():
    return build_series


@pytest.fixture
def make_growth():
    return growth_closes


# ============================================================================
# Providers
# ============================================================================


class FakePriceProvider(PriceProvider):
    """Serves canned series; unknown tickers are unavailable."""

    def __init__(self, series: dict[str, PriceSeries], delay: float = 0.0) -> None:
        self._series = series
        self._delay = delay
        self.calls: list[str] = []
        self._lock = Lock()

    @property
    def name(self) -> str:
        return "fake"

    def fetch_series(self, ticker: str, period: Period) -> PriceSeries:
        with self._lock:
            self.calls.append(ticker)
        if self._delay:
            time.sleep(self._delay)
        if ticker not in self._series:
            raise DataUnavailable(ticker, "unknown ticker")
        return self._series[ticker]


class FakeNewsProvider(NewsProvider):
    """Serves canned articles per ticker."""

    def __init__(self, articles: dict[str, list[NewsArticle]]) -> None:
        self._articles = articles
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "fake-news"

    def fetch_articles(self, ticker: str) -> list[NewsArticle]:
        self.calls.append(ticker)
        return list(self._articles.get(ticker, []))


@pytest.fixture
def price_provider_factory():
    return FakePriceProvider


@pytest.fixture
def news_provider_factory():
    return FakeNewsProvider


def assert_finite_bundle(value) -> None:
    """No NaN or infinity anywhere in a JSON bundle."""
    if isinstance(value, dict):
        for v in value.values():
            assert_finite_bundle(v)
    elif isinstance(value, list):
        for v in value:
            assert_finite_bundle(v)
    elif isinstance(value, float):
        assert math.isfinite(value)


@pytest.fixture
def check_finite():
    return assert_finite_bundle
