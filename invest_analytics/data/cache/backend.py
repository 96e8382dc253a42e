"""Key-value backing store contract for the cache layer."""

from typing import Protocol


class CacheError(Exception):
    """Base exception for cache errors."""

    pass


class CacheUnavailable(CacheError):
    """Backing store is unreachable."""

    pass


class SerializationError(CacheError):
    """Cached payload could not be encoded or decoded."""

    pass


class CacheBackend(Protocol):
    """Minimal key-value store used by ``CacheStore``.

    Every method raises ``CacheUnavailable`` when the store cannot be reached.
    Values are serialized strings; expiry is handled by the store.
    """

    def get(self, key: str) -> str | None: ...

    def set_with_ttl(self, key: str, data: str, seconds: int) -> bool: ...

    def delete(self, key: str) -> bool: ...

    def keys_matching(self, pattern: str) -> list[str]: ...

    def delete_many(self, keys: list[str]) -> int: ...

    def ping(self) -> bool: ...
