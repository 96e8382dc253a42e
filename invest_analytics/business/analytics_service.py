"""
Analytics Service

Serves risk, sector rotation and sentiment bundles behind the cache.

Flow per request:
    deterministic key → cache-aside → fetch inputs concurrently → compute
    → background write-back → bundle

Results built from unavailable upstream data are returned zeroed and never
cached, so a later request retries the provider.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

from invest_analytics.business.config import AnalyticsConfig
from invest_analytics.data.cache import (
    CacheNamespace,
    CacheStore,
    CacheTTL,
    RedisBackend,
    fingerprint,
)
from invest_analytics.data.models import PortfolioHolding, Period, PriceSeries
from invest_analytics.data.providers import (
    DataUnavailable,
    NewsProvider,
    PriceProvider,
    RequestTimeoutError,
    YahooProvider,
)
from invest_analytics.engine.models import (
    AggregateSentiment,
    CorrelationMatrix,
    RiskMetrics,
    SectorPerformance,
    SectorRotationResult,
    SentimentScore,
)
from invest_analytics.engine.portfolio import RiskMetricsEngine, validate_holdings
from invest_analytics.engine.sector import SectorRotationEngine
from invest_analytics.engine.sentiment import SentimentScorer

logger = logging.getLogger(__name__)


def _ticker_segments(tickers: list[str]) -> list[str]:
    """Upper-cased, de-duplicated, sorted tickers for cache key segments."""
    return sorted({t.strip().upper() for t in tickers})


def build_cache_store(config: AnalyticsConfig) -> CacheStore:
    """Create the cache store described by the config.

    A disabled cache yields a store without backend (always miss).
    """
    cache_cfg = config.cache
    backend = None
    if cache_cfg.enabled:
        backend = RedisBackend(
            host=cache_cfg.host,
            port=cache_cfg.port,
            db=cache_cfg.db,
            password=cache_cfg.password,
            socket_timeout=cache_cfg.socket_timeout,
            retry_interval=cache_cfg.retry_interval,
        )
    else:
        logger.info("Cache disabled, running uncached")
    return CacheStore(backend, prefix=cache_cfg.key_prefix, write_workers=cache_cfg.write_workers)


def create_service(config: AnalyticsConfig) -> "AnalyticsService":
    """Wire the Yahoo provider and configured cache into a service."""
    provider = YahooProvider(rate_limit=config.provider.rate_limit)
    return AnalyticsService(
        provider=provider,
        cache=build_cache_store(config),
        config=config,
        news_provider=provider,
    )


class AnalyticsService:
    """Cache-backed analytics for portfolios, sectors and news.

    Usage:
        config = AnalyticsConfig.load()
        service = AnalyticsService(YahooProvider(), build_cache_store(config), config)
        bundle = service.get_risk_metrics([PortfolioHolding("AAPL", 10, 150.0)])
    """

    def __init__(
        self,
        provider: PriceProvider,
        cache: CacheStore,
        config: AnalyticsConfig | None = None,
        news_provider: NewsProvider | None = None,
        scorer: SentimentScorer | None = None,
    ) -> None:
        """Initialize service.

        Args:
            provider: Price series source.
            cache: Cache store for bundles.
            config: Analytics config; defaults apply when omitted.
            news_provider: News source for sentiment; sentiment bundles are
                empty without one.
            scorer: Sentiment scorer; the default lexicon is used when omitted.
        """
        self.provider = provider
        self.cache = cache
        self.config = config or AnalyticsConfig()
        self.news_provider = news_provider
        self.scorer = scorer or SentimentScorer()
        self.risk_engine = RiskMetricsEngine(
            risk_free_rate=self.config.risk.risk_free_rate,
            trading_days=self.config.risk.trading_days,
            rolling_window=self.config.risk.rolling_window,
        )
        self.sector_engine = SectorRotationEngine(
            strong_threshold=self.config.sector.strong_threshold,
        )

    # ========== Fetching ==========

    def _fetch_series(
        self, tickers: list[str], period: Period
    ) -> tuple[dict[str, PriceSeries], list[str]]:
        """Fetch price series concurrently within the request's time budget.

        Returns:
            (series by ticker, tickers whose data was unavailable)

        Raises:
            RequestTimeoutError: Not every fetch finished within fetch_timeout.
        """
        unique = list(dict.fromkeys(tickers))
        if not unique:
            return {}, []

        timeout = self.config.provider.fetch_timeout
        workers = max(1, min(self.config.provider.max_workers, len(unique)))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch")
        try:
            futures = {t: executor.submit(self.provider.fetch_series, t, period) for t in unique}
            _, not_done = wait(futures.values(), timeout=timeout)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if not_done:
            pending = [t for t, f in futures.items() if f in not_done]
            logger.warning(f"Fetch timed out after {timeout}s for {pending}")
            raise RequestTimeoutError(f"Timed out after {timeout}s fetching {', '.join(pending)}")

        series: dict[str, PriceSeries] = {}
        unavailable: list[str] = []
        for ticker, future in futures.items():
            try:
                series[ticker] = future.result()
            except DataUnavailable as e:
                logger.warning(str(e))
                unavailable.append(ticker)
        return series, unavailable

    # ========== Risk Metrics ==========

    def risk_cache_key(self, holdings: list[PortfolioHolding], period: Period) -> str:
        """Deterministic key for a portfolio risk request.

        Tickers are sorted so holding order does not matter.
        """
        risk_cfg = self.config.risk
        ordered = sorted(holdings, key=lambda h: h.ticker.strip().upper())
        payload = {
            "holdings": [
                {"ticker": h.ticker.strip().upper(), "shares": h.shares, "avgCost": h.avg_cost}
                for h in ordered
            ],
            "riskFreeRate": risk_cfg.risk_free_rate,
            "tradingDays": risk_cfg.trading_days,
            "benchmark": risk_cfg.benchmark,
            "rollingWindow": risk_cfg.rolling_window,
        }
        tickers = _ticker_segments([h.ticker for h in ordered] + [risk_cfg.benchmark])
        return self.cache.key(
            CacheNamespace.RISK_METRICS, *tickers, Period(period).value, fingerprint(payload)
        )

    def get_risk_metrics(
        self, holdings: list[PortfolioHolding], period: Period | str | None = None
    ) -> dict[str, Any]:
        """Get the risk metrics bundle of a portfolio.

        Raises:
            ComputeError: Holdings are malformed (checked before any fetch).
            RequestTimeoutError: Price fetch exceeded fetch_timeout.
        """
        validate_holdings(holdings)
        period = Period(period) if period else self.config.risk.lookback_period
        key = self.risk_cache_key(holdings, period)

        try:
            return self.cache.cache_aside(
                key,
                CacheTTL.HISTORICAL_DATA,
                lambda: self._compute_risk(holdings, period),
            )
        except DataUnavailable as e:
            logger.warning(f"Returning empty risk metrics: {e}")
            return self._risk_bundle(
                holdings, period, RiskMetrics(cost_basis=sum(h.cost_basis for h in holdings)),
                unavailable=e.symbol.split(", "),
            )

    def _compute_risk(self, holdings: list[PortfolioHolding], period: Period) -> dict[str, Any]:
        benchmark_symbol = self.config.risk.benchmark
        tickers = [h.ticker for h in holdings]
        series, unavailable = self._fetch_series(tickers + [benchmark_symbol], period)
        if unavailable:
            # A partial portfolio would give wrong numbers
            raise DataUnavailable(", ".join(unavailable), "price history unavailable")

        prices = {t: series[t] for t in tickers}
        metrics = self.risk_engine.compute(holdings, prices, series[benchmark_symbol])
        logger.info(
            f"Risk metrics for {tickers}: vol={metrics.volatility:.4f}, "
            f"sharpe={metrics.sharpe_ratio:.2f}, beta={metrics.beta:.2f}"
        )
        return self._risk_bundle(holdings, period, metrics)

    def _risk_bundle(
        self,
        holdings: list[PortfolioHolding],
        period: Period,
        metrics: RiskMetrics,
        unavailable: list[str] | None = None,
    ) -> dict[str, Any]:
        return {
            "tickers": sorted(h.ticker.strip().upper() for h in holdings),
            "period": period.value,
            "benchmark": self.config.risk.benchmark,
            "metrics": metrics.to_dict(),
            "unavailable": unavailable or [],
        }

    # ========== Sector Rotation ==========

    def get_sector_rotation(
        self, sectors: dict[str, str] | None = None, period: Period | str | None = None
    ) -> dict[str, Any]:
        """Get the sector rotation bundle.

        Args:
            sectors: Sector name → proxy ticker; defaults to the configured universe.
            period: Lookback period; defaults to the configured one.

        Raises:
            RequestTimeoutError: Price fetch exceeded fetch_timeout.
        """
        sector_cfg = self.config.sector
        sectors = sectors or sector_cfg.sectors
        period = Period(period) if period else sector_cfg.lookback_period

        payload = {
            "sectors": {name: t.upper() for name, t in sectors.items()},
            "benchmark": sector_cfg.benchmark,
            "strongThreshold": sector_cfg.strong_threshold,
        }
        tickers = _ticker_segments(list(sectors.values()) + [sector_cfg.benchmark])
        key = self.cache.key(
            CacheNamespace.SECTOR_ROTATION, *tickers, period.value, fingerprint(payload)
        )

        try:
            return self.cache.cache_aside(
                key,
                CacheTTL.SECTOR_DATA,
                lambda: self._compute_sectors(sectors, period),
                cache_if=lambda bundle: not bundle["missingSectors"],
            )
        except DataUnavailable as e:
            logger.warning(f"Returning empty sector rotation: {e}")
            empty = SectorRotationResult(
                snapshots=[],
                correlation=CorrelationMatrix(sectors=[], values={}),
                benchmark=sector_cfg.benchmark,
                benchmark_performance=SectorPerformance(),
                missing_sectors=list(sectors),
            )
            return {**empty.to_dict(), "period": period.value}

    def _compute_sectors(self, sectors: dict[str, str], period: Period) -> dict[str, Any]:
        benchmark_symbol = self.config.sector.benchmark
        series, unavailable = self._fetch_series(
            list(sectors.values()) + [benchmark_symbol], period
        )
        if benchmark_symbol in unavailable:
            raise DataUnavailable(benchmark_symbol, "benchmark history unavailable")

        sector_series = {name: series[t] for name, t in sectors.items() if t in series}
        result = self.sector_engine.analyze(sector_series, series[benchmark_symbol], tickers=sectors)
        result.missing_sectors.extend(name for name, t in sectors.items() if t not in series)
        logger.info(
            f"Sector rotation: {len(result.snapshots)} ranked, "
            f"{len(result.missing_sectors)} missing"
        )
        return {**result.to_dict(), "period": period.value}

    # ========== Sentiment ==========

    def score_text(self, text: str) -> SentimentScore:
        """Score free text (uncached)."""
        return self.scorer.score(text)

    def get_news_sentiment(self, ticker: str) -> dict[str, Any]:
        """Get the news sentiment bundle of a ticker."""
        symbol = ticker.strip().upper()
        key = self.cache.key(CacheNamespace.SENTIMENT, symbol)

        try:
            return self.cache.cache_aside(
                key, CacheTTL.SENTIMENT, lambda: self._compute_sentiment(symbol)
            )
        except DataUnavailable as e:
            logger.warning(f"Returning empty sentiment: {e}")
            return {"ticker": symbol, "articles": [], "aggregate": AggregateSentiment().to_dict()}

    def _compute_sentiment(self, symbol: str) -> dict[str, Any]:
        if self.news_provider is None:
            raise DataUnavailable(symbol, "no news provider configured")

        articles = self.news_provider.fetch_articles(symbol)
        if not articles:
            raise DataUnavailable(symbol, "no news articles")

        scored = self.scorer.enhance_articles(articles)
        aggregate = self.scorer.aggregate([s for _, s in scored])
        return {
            "ticker": symbol,
            "articles": [{**a.to_dict(), "sentiment": s.to_dict()} for a, s in scored],
            "aggregate": aggregate.to_dict(),
        }
