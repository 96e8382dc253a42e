"""Tests for the cache-backed analytics service."""

import pytest

from invest_analytics.business.analytics_service import AnalyticsService, build_cache_store
from invest_analytics.business.config import (
    AnalyticsConfig,
    CacheConfig,
    ProviderConfig,
    RiskConfig,
    SectorConfig,
)
from invest_analytics.data.cache import CacheTTL
from invest_analytics.data.models import NewsArticle, Period, PortfolioHolding
from invest_analytics.data.providers import RequestTimeoutError
from invest_analytics.engine.base import ComputeError

SECTORS = {"Technology": "XLK", "Energy": "XLE", "Utilities": "XLU"}


@pytest.fixture
def config():
    return AnalyticsConfig(
        sector=SectorConfig(sectors=dict(SECTORS)),
        provider=ProviderConfig(fetch_timeout=5.0, max_workers=4),
    )


@pytest.fixture
def prices(make_series, make_growth):
    """Price universe covering holdings, sectors and both benchmarks."""
    return {
        "AAPL": make_series("AAPL", make_growth(0.002, wiggle=0.01)),
        "MSFT": make_series("MSFT", make_growth(0.001, wiggle=0.005)),
        "^GSPC": make_series("^GSPC", make_growth(0.0008, wiggle=0.004)),
        "SPY": make_series("SPY", make_growth(0.0005, wiggle=0.001)),
        "XLK": make_series("XLK", make_growth(0.002, wiggle=0.001)),
        "XLE": make_series("XLE", make_growth(-0.002, wiggle=0.001)),
        "XLU": make_series("XLU", make_growth(0.001, wiggle=0.001)),
    }


@pytest.fixture
def provider(prices, price_provider_factory):
    return price_provider_factory(prices)


@pytest.fixture
def service(provider, store, config):
    return AnalyticsService(provider, store, config)


HOLDINGS = [PortfolioHolding("AAPL", 10, 90.0), PortfolioHolding("MSFT", 5, 95.0)]


class TestRiskMetrics:
    """Tests for get_risk_metrics."""

    def test_bundle_shape(self, service, check_finite):
        """Test the risk bundle fields."""
        bundle = service.get_risk_metrics(HOLDINGS)

        assert bundle["tickers"] == ["AAPL", "MSFT"]
        assert bundle["period"] == "1y"
        assert bundle["benchmark"] == "^GSPC"
        assert bundle["unavailable"] == []
        assert bundle["metrics"]["dataPoints"] == 100
        assert bundle["metrics"]["costBasis"] == 1375.0
        check_finite(bundle)

    def test_second_call_hits_cache(self, service, provider, store, backend):
        """Test the bundle is written back and served from cache."""
        first = service.get_risk_metrics(HOLDINGS)
        assert store.drain(timeout=5)
        fetches = len(provider.calls)

        second = service.get_risk_metrics(HOLDINGS)

        assert len(provider.calls) == fetches
        assert second["metrics"]["sharpeRatio"] == first["metrics"]["sharpeRatio"]
        assert store.stats.hits == 1
        key = service.risk_cache_key(HOLDINGS, Period.ONE_YEAR)
        assert backend.ttls[key] == CacheTTL.HISTORICAL_DATA

    def test_fetches_each_ticker_once(self, service, provider):
        """Test holdings and benchmark are fetched once each."""
        service.get_risk_metrics(HOLDINGS)
        assert sorted(provider.calls) == ["AAPL", "MSFT", "^GSPC"]

    def test_key_ignores_holding_order(self, service):
        """Test the cache key does not depend on holding order or case."""
        reordered = [PortfolioHolding("msft", 5, 95.0), PortfolioHolding("aapl", 10, 90.0)]
        assert service.risk_cache_key(HOLDINGS, Period.ONE_YEAR) == service.risk_cache_key(
            reordered, Period.ONE_YEAR
        )

    def test_key_changes_with_inputs(self, service):
        """Test shares and period are part of the key."""
        base = service.risk_cache_key(HOLDINGS, Period.ONE_YEAR)
        more = [PortfolioHolding("AAPL", 11, 90.0), HOLDINGS[1]]

        assert service.risk_cache_key(more, Period.ONE_YEAR) != base
        assert service.risk_cache_key(HOLDINGS, Period.SIX_MONTHS) != base
        assert base.startswith("investment:risk-metrics:AAPL:MSFT:^GSPC:1y:")

    def test_rolling_window_separates_entries(self, provider, store, config):
        """Test services with different rolling windows do not share entries."""
        short = AnalyticsConfig(
            risk=RiskConfig(rolling_window=10),
            sector=config.sector,
            provider=config.provider,
        )
        default_service = AnalyticsService(provider, store, config)
        short_service = AnalyticsService(provider, store, short)

        assert default_service.risk_cache_key(HOLDINGS, Period.ONE_YEAR) != (
            short_service.risk_cache_key(HOLDINGS, Period.ONE_YEAR)
        )

        first = default_service.get_risk_metrics(HOLDINGS)
        assert store.drain(timeout=5)
        second = short_service.get_risk_metrics(HOLDINGS)

        assert len(first["metrics"]["volatilityHistory"]) == 70
        assert len(second["metrics"]["volatilityHistory"]) == 90
        assert store.stats.hits == 0

    def test_invalid_holdings_fail_before_fetch(self, service, provider):
        """Test malformed holdings raise without touching the provider."""
        with pytest.raises(ComputeError):
            service.get_risk_metrics([PortfolioHolding("AAPL", -1)])
        assert provider.calls == []

    def test_unavailable_ticker_gives_zeroed_bundle(self, service, store, backend):
        """Test missing price data yields a zeroed bundle that is not cached."""
        holdings = HOLDINGS + [PortfolioHolding("NOPE", 1, 10.0)]

        bundle = service.get_risk_metrics(holdings)
        store.drain(timeout=5)

        assert bundle["unavailable"] == ["NOPE"]
        assert bundle["metrics"]["volatility"] == 0.0
        assert bundle["metrics"]["costBasis"] == 1385.0
        assert backend.data == {}

    def test_timeout_raises_and_caches_nothing(
        self, prices, price_provider_factory, store, backend
    ):
        """Test a slow provider exceeds the fetch budget."""
        config = AnalyticsConfig(provider=ProviderConfig(fetch_timeout=0.05))
        slow = price_provider_factory(prices, delay=0.5)
        service = AnalyticsService(slow, store, config)

        with pytest.raises(RequestTimeoutError):
            service.get_risk_metrics(HOLDINGS)
        store.drain(timeout=5)

        assert backend.data == {}

    def test_invalidate_ticker_removes_entry(self, service, store, backend):
        """Test invalidating a holding drops the cached risk bundle."""
        service.get_risk_metrics(HOLDINGS)
        store.drain(timeout=5)
        assert len(backend.data) == 1

        assert store.invalidate_ticker_cache("msft") == 1
        assert backend.data == {}

    def test_invalidate_benchmark_removes_entry(self, service, store, backend):
        """Test the benchmark is a key segment too."""
        service.get_risk_metrics(HOLDINGS)
        store.drain(timeout=5)

        assert store.invalidate_ticker_cache("^GSPC") == 1

    def test_degraded_cache_still_serves(self, provider, down_store, config):
        """Test results are computed every time when the store is down."""
        service = AnalyticsService(provider, down_store, config)

        first = service.get_risk_metrics(HOLDINGS)
        down_store.drain(timeout=5)
        second = service.get_risk_metrics(HOLDINGS)

        assert first["metrics"]["dataPoints"] == second["metrics"]["dataPoints"] == 100
        assert provider.calls.count("AAPL") == 2
        assert down_store.stats.misses == 2


class TestSectorRotation:
    """Tests for get_sector_rotation."""

    def test_ranked_and_cached(self, service, provider, store, backend):
        """Test a complete universe is ranked and cached."""
        bundle = service.get_sector_rotation()
        store.drain(timeout=5)

        assert [s["sector"] for s in bundle["sectors"]] == ["Technology", "Utilities", "Energy"]
        assert bundle["period"] == "1y"
        assert bundle["missingSectors"] == []
        assert len(backend.data) == 1
        assert list(backend.ttls.values()) == [CacheTTL.SECTOR_DATA]

        fetches = len(provider.calls)
        service.get_sector_rotation()
        assert len(provider.calls) == fetches

    def test_missing_sector_not_cached(self, service, store, backend):
        """Test an unavailable sector is reported and the result not cached."""
        bundle = service.get_sector_rotation({**SECTORS, "Materials": "XLB"})
        store.drain(timeout=5)

        assert bundle["missingSectors"] == ["Materials"]
        assert len(bundle["sectors"]) == 3
        assert backend.data == {}

    def test_missing_benchmark_gives_empty(self, prices, price_provider_factory, store, config):
        """Test no benchmark data yields an empty bundle."""
        del prices["SPY"]
        service = AnalyticsService(price_provider_factory(prices), store, config)

        bundle = service.get_sector_rotation()

        assert bundle["sectors"] == []
        assert bundle["missingSectors"] == list(SECTORS)
        assert bundle["benchmark"] == "SPY"

    def test_period_override(self, service):
        """Test the period argument is honored."""
        assert service.get_sector_rotation(period="3mo")["period"] == "3mo"


class TestNewsSentiment:
    """Tests for get_news_sentiment and score_text."""

    def test_bundle_cached(self, provider, store, backend, config, news_provider_factory):
        """Test scored articles are aggregated and cached per ticker."""
        news = news_provider_factory(
            {
                "AAPL": [
                    NewsArticle(title="Apple shares soar after earnings beat"),
                    NewsArticle(title="Apple faces lawsuit, stock plunges"),
                ]
            }
        )
        service = AnalyticsService(provider, store, config, news_provider=news)

        bundle = service.get_news_sentiment("aapl")
        store.drain(timeout=5)

        assert bundle["ticker"] == "AAPL"
        assert len(bundle["articles"]) == 2
        assert bundle["articles"][0]["sentiment"]["label"] == "bullish"
        assert bundle["aggregate"]["bullishCount"] + bundle["aggregate"]["bearishCount"] >= 1
        assert "investment:sentiment:AAPL" in backend.data
        assert backend.ttls["investment:sentiment:AAPL"] == CacheTTL.SENTIMENT

        service.get_news_sentiment("AAPL")
        assert news.calls == ["AAPL"]

    def test_no_articles_not_cached(self, provider, store, backend, config, news_provider_factory):
        """Test a ticker without news yields an empty, uncached bundle."""
        service = AnalyticsService(provider, store, config, news_provider=news_provider_factory({}))

        bundle = service.get_news_sentiment("AAPL")
        store.drain(timeout=5)

        assert bundle["articles"] == []
        assert bundle["aggregate"]["label"] == "neutral"
        assert backend.data == {}

    def test_no_news_provider(self, service):
        """Test sentiment without a news source is empty."""
        assert service.get_news_sentiment("AAPL")["articles"] == []

    def test_score_text(self, service):
        """Test free text scoring."""
        assert service.score_text("bearish outlook, heavy losses").score < 0


class TestBuildCacheStore:
    """Tests for cache store construction."""

    def test_disabled_cache(self):
        """Test a disabled cache always misses and reports unhealthy."""
        store = build_cache_store(AnalyticsConfig(cache=CacheConfig(enabled=False)))
        try:
            assert store.health() is False
            assert store.get("investment:sentiment:AAPL") is None
            assert store.key_count() == 0
        finally:
            store.close()

    def test_prefix_from_config(self):
        """Test keys use the configured prefix."""
        store = build_cache_store(
            AnalyticsConfig(cache=CacheConfig(enabled=False, key_prefix="test"))
        )
        try:
            assert store.key("sentiment", "AAPL") == "test:sentiment:AAPL"
        finally:
            store.close()
