"""
Analytics Configuration

Conventions (risk-free rate, benchmark, thresholds) and infrastructure
settings (cache connection, fetch timeouts) for the analytics service.

Load order: dataclass defaults → config/analytics.yaml → environment.
Only cache connection settings are read from the environment:

| Variable        | Field               |
|-----------------|---------------------|
| REDIS_ENABLED   | cache.enabled       |
| REDIS_HOST      | cache.host          |
| REDIS_PORT      | cache.port          |
| REDIS_DB        | cache.db            |
| REDIS_PASSWORD  | cache.password      |
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from invest_analytics.data.cache import DEFAULT_KEY_PREFIX
from invest_analytics.data.models import Period
from invest_analytics.engine.portfolio import DEFAULT_RISK_FREE_RATE
from invest_analytics.engine.returns import TRADING_DAYS_PER_YEAR
from invest_analytics.engine.sector import DEFAULT_STRONG_THRESHOLD, SECTOR_ETFS

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "analytics.yaml"


@dataclass
class RiskConfig:
    """Portfolio risk conventions"""

    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
    trading_days: int = TRADING_DAYS_PER_YEAR
    benchmark: str = "^GSPC"
    lookback_period: Period = Period.ONE_YEAR
    rolling_window: int = 30


@dataclass
class SectorConfig:
    """Sector rotation conventions"""

    benchmark: str = "SPY"
    strong_threshold: float = DEFAULT_STRONG_THRESHOLD
    lookback_period: Period = Period.ONE_YEAR
    sectors: dict[str, str] = field(default_factory=lambda: dict(SECTOR_ETFS))


@dataclass
class CacheConfig:
    """Redis connection and write-back settings"""

    enabled: bool = True
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str | None = None
    key_prefix: str = DEFAULT_KEY_PREFIX
    write_workers: int = 2
    socket_timeout: float = 5.0
    retry_interval: float = 30.0


@dataclass
class ProviderConfig:
    """Upstream fetch settings

    Attributes:
        fetch_timeout: Seconds allowed for fetching all inputs of one request.
        max_workers: Concurrent fetches per request.
        rate_limit: Minimum seconds between provider calls.
    """

    fetch_timeout: float = 15.0
    max_workers: int = 8
    rate_limit: float = 0.5


@dataclass
class AnalyticsConfig:
    """Analytics configuration"""

    risk: RiskConfig = field(default_factory=RiskConfig)
    sector: SectorConfig = field(default_factory=SectorConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AnalyticsConfig":
        """Load config from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalyticsConfig":
        """Create config from a dictionary.

        Missing sections and fields keep their dataclass defaults.
        """
        config = cls()

        if "risk" in data:
            r = data["risk"]
            config.risk = RiskConfig(
                risk_free_rate=float(r.get("risk_free_rate", DEFAULT_RISK_FREE_RATE)),
                trading_days=int(r.get("trading_days", TRADING_DAYS_PER_YEAR)),
                benchmark=r.get("benchmark", "^GSPC"),
                lookback_period=Period(r.get("lookback_period", Period.ONE_YEAR.value)),
                rolling_window=int(r.get("rolling_window", 30)),
            )

        if "sector" in data:
            s = data["sector"]
            config.sector = SectorConfig(
                benchmark=s.get("benchmark", "SPY"),
                strong_threshold=float(s.get("strong_threshold", DEFAULT_STRONG_THRESHOLD)),
                lookback_period=Period(s.get("lookback_period", Period.ONE_YEAR.value)),
                sectors=dict(s.get("sectors") or SECTOR_ETFS),
            )

        if "cache" in data:
            c = data["cache"]
            config.cache = CacheConfig(
                enabled=bool(c.get("enabled", True)),
                host=c.get("host", "localhost"),
                port=int(c.get("port", 6379)),
                db=int(c.get("db", 0)),
                password=c.get("password"),
                key_prefix=c.get("key_prefix", DEFAULT_KEY_PREFIX),
                write_workers=int(c.get("write_workers", 2)),
                socket_timeout=float(c.get("socket_timeout", 5.0)),
                retry_interval=float(c.get("retry_interval", 30.0)),
            )

        if "provider" in data:
            p = data["provider"]
            config.provider = ProviderConfig(
                fetch_timeout=float(p.get("fetch_timeout", 15.0)),
                max_workers=int(p.get("max_workers", 8)),
                rate_limit=float(p.get("rate_limit", 0.5)),
            )

        return config

    def apply_env(self) -> "AnalyticsConfig":
        """Override cache connection settings from the environment."""
        load_dotenv()

        enabled = os.getenv("REDIS_ENABLED")
        if enabled is not None:
            self.cache.enabled = enabled.lower() in ("true", "1", "yes")
        self.cache.host = os.getenv("REDIS_HOST", self.cache.host)
        port = os.getenv("REDIS_PORT")
        if port:
            self.cache.port = int(port)
        db = os.getenv("REDIS_DB")
        if db:
            self.cache.db = int(db)
        self.cache.password = os.getenv("REDIS_PASSWORD") or self.cache.password
        return self

    @classmethod
    def load(cls, path: str | Path | None = None) -> "AnalyticsConfig":
        """Load config from YAML (if present) then apply environment overrides."""
        config_file = Path(path) if path else DEFAULT_CONFIG_PATH
        if config_file.exists():
            config = cls.from_yaml(config_file)
        else:
            config = cls()
        return config.apply_env()
