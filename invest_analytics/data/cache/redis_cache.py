"""Redis backing store for the analytics cache.

Wraps a redis-py client behind the ``CacheBackend`` contract. Connection
problems surface as ``CacheUnavailable`` so the cache layer can degrade to
uncached operation instead of failing requests.
"""

import logging
import time
from threading import Lock
from typing import Any

import redis

from invest_analytics.data.cache.backend import CacheError, CacheUnavailable

logger = logging.getLogger(__name__)


class RedisBackend:
    """Redis-based key-value store.

    The client connects lazily. After a failed connection attempt, further
    attempts are skipped until ``retry_interval`` seconds have passed.

    Usage:
        backend = RedisBackend(host="localhost")
        store = CacheStore(backend)
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: str | None = None,
        socket_timeout: float = 5.0,
        retry_interval: float = 30.0,
        client: Any = None,
    ) -> None:
        """Initialize Redis backend.

        Args:
            host: Redis server host.
            port: Redis server port.
            db: Redis database number.
            password: Optional Redis password.
            socket_timeout: Connect and command timeout in seconds.
            retry_interval: Seconds to wait before reconnecting after a failure.
            client: Pre-built client (used instead of connecting).
        """
        self._host = host
        self._port = port
        self._db = db
        self._password = password
        self._socket_timeout = socket_timeout
        self._retry_interval = retry_interval
        self._client: Any = client
        self._available = client is not None
        self._last_attempt = 0.0
        self._lock = Lock()

    @property
    def is_available(self) -> bool:
        """Whether the last operation reached Redis."""
        return self._available

    def _connect(self) -> Any:
        """Return a live client or raise ``CacheUnavailable``."""
        with self._lock:
            if self._available and self._client is not None:
                return self._client

            now = time.monotonic()
            if self._last_attempt and now - self._last_attempt < self._retry_interval:
                raise CacheUnavailable("Redis unavailable (waiting before reconnect)")
            self._last_attempt = now

            try:
                client = self._client or redis.Redis(
                    host=self._host,
                    port=self._port,
                    db=self._db,
                    password=self._password,
                    decode_responses=True,
                    socket_connect_timeout=self._socket_timeout,
                    socket_timeout=self._socket_timeout,
                )
                client.ping()
            except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
                logger.warning(f"Redis cache unavailable at {self._host}:{self._port}: {e}")
                self._available = False
                raise CacheUnavailable(str(e)) from e

            self._client = client
            self._available = True
            logger.info(f"Redis cache connected at {self._host}:{self._port}")
            return client

    def _call(self, op: str, *args: Any) -> Any:
        """Run a client command, translating redis errors."""
        client = self._connect()
        try:
            result = getattr(client, op)(*args)
            if op == "scan_iter":
                result = list(result)
            return result
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            logger.warning(f"Redis {op} failed, marking unavailable: {e}")
            self._available = False
            raise CacheUnavailable(str(e)) from e
        except redis.exceptions.RedisError as e:
            raise CacheError(f"Redis {op} error: {e}") from e

    def get(self, key: str) -> str | None:
        return self._call("get", key)

    def set_with_ttl(self, key: str, data: str, seconds: int) -> bool:
        return bool(self._call("setex", key, seconds, data))

    def delete(self, key: str) -> bool:
        return self._call("delete", key) > 0

    def keys_matching(self, pattern: str) -> list[str]:
        return self._call("scan_iter", pattern)

    def delete_many(self, keys: list[str]) -> int:
        if not keys:
            return 0
        return int(self._call("delete", *keys))

    def ping(self) -> bool:
        """Check Redis connection health."""
        try:
            return bool(self._call("ping"))
        except CacheError as e:
            logger.debug(f"Redis health check failed: {e}")
            return False

    def close(self) -> None:
        """Close the Redis connection."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                logger.info("Redis connection closed")
            self._client = None
            self._available = False
