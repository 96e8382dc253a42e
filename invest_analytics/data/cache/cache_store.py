"""Cache-aside store with TTL policies and hit/miss accounting.

The store never raises on infrastructure failure: an unreachable backend
turns every read into a miss and every write into a no-op, so callers keep
working uncached.
"""

import hashlib
import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from threading import Lock
from typing import Any, Callable, TypeVar

from invest_analytics.data.cache.backend import (
    CacheBackend,
    CacheUnavailable,
    SerializationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_KEY_PREFIX = "investment"


class CacheTTL:
    """Cache TTL policy per data category (seconds)."""

    STOCK_QUOTE = 5 * 60
    STOCK_CHART_SHORT = 15 * 60  # 1D, 5D
    STOCK_CHART_LONG = 60 * 60  # 1M, 3M, 6M, 1Y
    TECHNICAL_INDICATORS = 10 * 60
    NEWS = 5 * 60
    SENTIMENT = 10 * 60
    HISTORICAL_DATA = 60 * 60
    SECTOR_DATA = 30 * 60


class CacheNamespace:
    """Logical key namespaces."""

    RISK_METRICS = "risk-metrics"
    SECTOR_ROTATION = "sector-rotation"
    SENTIMENT = "sentiment"
    NEWS = "news"


def generate_cache_key(namespace: str, *parts: str | int | float, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Build a colon-joined cache key, e.g. ``investment:sentiment:AAPL``."""
    return ":".join([prefix, namespace, *(str(p) for p in parts)])


def fingerprint(payload: Any) -> str:
    """Deterministic short hash of a JSON-serializable payload.

    Dict keys are sorted so logically equal payloads hash equally.
    """
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=_json_default)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class CacheStats:
    """Running cache counters.

    Counters are shared across concurrent requests, so every update goes
    through a lock.
    """

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    errors: int = 0

    def __post_init__(self) -> None:
        self._lock = Lock()

    def incr(self, counter: str, amount: int = 1) -> None:
        with self._lock:
            setattr(self, counter, getattr(self, counter) + amount)

    def reset(self) -> None:
        with self._lock:
            self.hits = self.misses = self.sets = self.deletes = self.errors = 0

    @property
    def hit_rate(self) -> float:
        """Hit rate as a percentage of lookups."""
        with self._lock:
            total = self.hits + self.misses
            return (self.hits / total) * 100 if total > 0 else 0.0

    def snapshot(self) -> dict[str, Any]:
        """Consistent copy of the counters."""
        with self._lock:
            total = self.hits + self.misses
            hit_rate = (self.hits / total) * 100 if total > 0 else 0.0
            return {
                "hits": self.hits,
                "misses": self.misses,
                "sets": self.sets,
                "deletes": self.deletes,
                "errors": self.errors,
                "total": total,
                "hitRate": f"{hit_rate:.2f}%",
            }


class CacheStore:
    """Generic cache over a key-value backing store.

    Usage:
        store = CacheStore(RedisBackend())
        bundle = store.cache_aside(key, CacheTTL.SECTOR_DATA, compute)
        store.invalidate_ticker_cache("AAPL")
    """

    def __init__(
        self,
        backend: CacheBackend | None,
        prefix: str = DEFAULT_KEY_PREFIX,
        stats: CacheStats | None = None,
        write_workers: int = 2,
    ) -> None:
        """Initialize cache store.

        Args:
            backend: Backing store, or None to run uncached.
            prefix: Key prefix shared by every entry of this store.
            stats: Counters to update; a fresh set is created if omitted.
            write_workers: Threads used for background write-back.
        """
        self._backend = backend
        self.prefix = prefix
        self._stats = stats or CacheStats()
        self._executor = ThreadPoolExecutor(
            max_workers=write_workers, thread_name_prefix="cache-write"
        )
        self._pending: set[Future] = set()
        self._pending_lock = Lock()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def get_stats(self) -> dict[str, Any]:
        """Counters plus derived hit rate."""
        return self._stats.snapshot()

    def reset_stats(self) -> None:
        self._stats.reset()

    def key(self, namespace: str, *parts: str | int | float) -> str:
        """Build a key under this store's prefix."""
        return generate_cache_key(namespace, *parts, prefix=self.prefix)

    # ========== Serialization ==========

    def _serialize(self, value: Any) -> str:
        try:
            return json.dumps(value, default=_json_default)
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e

    def _deserialize(self, data: str) -> Any:
        try:
            return json.loads(data)
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e

    # ========== Basic Operations ==========

    def get(self, key: str) -> Any | None:
        """Get a cached value.

        Returns:
            The deserialized value, or None when absent, unreachable or corrupt.
        """
        if self._backend is None:
            self._stats.incr("misses")
            return None

        try:
            raw = self._backend.get(key)
        except CacheUnavailable as e:
            logger.debug(f"Cache unavailable on get {key}: {e}")
            self._stats.incr("misses")
            return None
        except Exception as e:
            logger.warning(f"Cache get error for {key}: {e}")
            self._stats.incr("errors")
            return None

        if raw is None:
            self._stats.incr("misses")
            return None

        try:
            value = self._deserialize(raw)
        except SerializationError as e:
            logger.warning(f"Discarding corrupt cache entry {key}: {e}")
            self._stats.incr("errors")
            self._discard(key)
            return None

        self._stats.incr("hits")
        logger.debug(f"Cache hit: {key}")
        return value

    def set(self, key: str, value: Any, ttl: int) -> bool:
        """Serialize and store a value with an expiry.

        Returns:
            True if stored, False on any failure.
        """
        if value is None:
            return False
        try:
            payload = self._serialize(value)
        except SerializationError as e:
            logger.warning(f"Cannot serialize value for {key}: {e}")
            self._stats.incr("errors")
            return False
        return self._write(key, payload, ttl)

    def _write(self, key: str, payload: str, ttl: int) -> bool:
        if self._backend is None:
            return False
        try:
            stored = self._backend.set_with_ttl(key, payload, int(ttl))
        except CacheUnavailable as e:
            logger.debug(f"Cache unavailable on set {key}: {e}")
            return False
        except Exception as e:
            logger.warning(f"Cache set error for {key}: {e}")
            self._stats.incr("errors")
            return False

        if stored:
            self._stats.incr("sets")
            logger.debug(f"Cache set: {key} (TTL={ttl}s)")
        return bool(stored)

    def delete(self, key: str) -> bool:
        """Delete a single key."""
        if self._backend is None:
            return False
        try:
            deleted = self._backend.delete(key)
        except CacheUnavailable as e:
            logger.debug(f"Cache unavailable on delete {key}: {e}")
            return False
        except Exception as e:
            logger.warning(f"Cache delete error for {key}: {e}")
            self._stats.incr("errors")
            return False

        if deleted:
            self._stats.incr("deletes")
        return bool(deleted)

    def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern.

        Returns:
            Number of keys deleted.
        """
        return self._delete_matching([pattern])

    def _delete_matching(self, patterns: list[str]) -> int:
        if self._backend is None:
            return 0
        try:
            keys: set[str] = set()
            for pattern in patterns:
                keys.update(self._backend.keys_matching(pattern))
            if not keys:
                return 0
            deleted = self._backend.delete_many(sorted(keys))
        except CacheUnavailable as e:
            logger.debug(f"Cache unavailable on delete {patterns}: {e}")
            return 0
        except Exception as e:
            logger.warning(f"Cache delete error for {patterns}: {e}")
            self._stats.incr("errors")
            return 0

        self._stats.incr("deletes", deleted)
        return deleted

    def _discard(self, key: str) -> None:
        """Best-effort removal of a corrupt entry."""
        try:
            self._backend.delete(key)
        except Exception as e:
            logger.debug(f"Could not discard {key}: {e}")

    # ========== Cache-Aside ==========

    def cache_aside(
        self,
        key: str,
        ttl: int,
        compute: Callable[[], T],
        cache_if: Callable[[T], bool] | None = None,
    ) -> T:
        """Return the cached value, or compute it and cache it in the background.

        Failures of ``compute`` propagate and nothing is cached. Write-back
        failures are logged and counted, never raised.

        Args:
            key: Cache key.
            ttl: Expiry in seconds.
            compute: Produces the value on a miss.
            cache_if: Optional predicate; the value is cached only if it returns True.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = compute()

        if value is not None and (cache_if is None or cache_if(value)):
            self._schedule_write(key, value, ttl)
        return value

    def _schedule_write(self, key: str, value: Any, ttl: int) -> None:
        # Serialize on the caller's thread so later mutation of value cannot race the write
        try:
            payload = self._serialize(value)
        except SerializationError as e:
            logger.warning(f"Cannot serialize value for {key}: {e}")
            self._stats.incr("errors")
            return

        try:
            future = self._executor.submit(self._write, key, payload, ttl)
        except RuntimeError as e:
            logger.warning(f"Cache write-back for {key} not scheduled: {e}")
            return

        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(lambda f: self._on_write_done(key, f))

    def _on_write_done(self, key: str, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(f"Failed to cache key {key}: {exc}")
            self._stats.incr("errors")
        elif not future.result():
            logger.warning(f"Failed to cache key {key}")

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for pending background writes.

        Returns:
            True if every pending write finished within the timeout.
        """
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Finish pending writes and stop the write-back workers."""
        self._executor.shutdown(wait=True)

    # ========== Maintenance ==========

    def invalidate_ticker_cache(self, ticker: str) -> int:
        """Delete every entry, in any namespace, that references a ticker.

        Returns:
            Number of keys deleted.
        """
        symbol = ticker.strip().upper()
        patterns = [
            generate_cache_key("*", symbol, "*", prefix=self.prefix),
            generate_cache_key("*", symbol, prefix=self.prefix),
        ]
        deleted = self._delete_matching(patterns)
        logger.info(f"Cache invalidated for {symbol}: {deleted} keys")
        return deleted

    def flush(self) -> int:
        """Delete every entry under this store's prefix and reset stats."""
        deleted = self.delete_pattern(f"{self.prefix}:*")
        self._stats.reset()
        logger.info(f"Cache flushed: {deleted} keys")
        return deleted

    def key_count(self) -> int:
        """Number of entries under this store's prefix (0 when unreachable)."""
        if self._backend is None:
            return 0
        try:
            return len(self._backend.keys_matching(f"{self.prefix}:*"))
        except CacheUnavailable:
            return 0
        except Exception as e:
            logger.warning(f"Cache key count error: {e}")
            self._stats.incr("errors")
            return 0

    def health(self) -> bool:
        """Check whether the backing store answers."""
        if self._backend is None:
            return False
        try:
            return bool(self._backend.ping())
        except Exception as e:
            logger.debug(f"Cache health check failed: {e}")
            return False

    def warm(self, tickers: list[str], fetcher: Callable[[str], Any]) -> int:
        """Populate the cache by running a fetcher for each ticker.

        Failures are logged and skipped.

        Returns:
            Number of tickers warmed successfully.
        """
        logger.info(f"Warming cache for {len(tickers)} tickers...")
        warmed = 0
        for ticker in tickers:
            try:
                fetcher(ticker)
                warmed += 1
            except Exception as e:
                logger.error(f"Failed to warm cache for {ticker}: {e}")
        logger.info("Cache warming complete")
        return warmed
