"""
Result cache for debt-tracker.

Uses diskcache for SQLite-based persistent caching of snapshot and
history results. The cache is an injected object: analyzers receive an
instance (or None) rather than reaching for a module-level store.
"""

import hashlib
import json
from typing import Any, Callable, Optional, TypeVar

from diskcache import Cache

from .config import TrackerConfig
from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ResultCache:
    """
    Disk-backed cache for analysis results.

    Features:
    - Keys derived from result kind, repository, parameters and config hash
    - TTL-based expiration
    - Size-limited with least-recently-stored eviction
    - Thread-safe operations
    """

    def __init__(
        self,
        cache_dir: str = ".debt-tracker-cache",
        ttl_seconds: int = 3600,
        size_limit_bytes: int = 64 * 1024 * 1024,
        enabled: bool = True,
    ):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache storage
            ttl_seconds: Time-to-live of each entry; 0 disables expiry
            size_limit_bytes: Disk budget before eviction
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.ttl_seconds = ttl_seconds
        self.hits = 0
        self.misses = 0

        if self.enabled:
            self.cache = Cache(cache_dir, size_limit=size_limit_bytes)
            logger.debug(f"Cache initialized at {cache_dir} with TTL={ttl_seconds}s")
        else:
            self.cache = None
            logger.debug("Cache disabled")

    @classmethod
    def from_config(cls, config: TrackerConfig) -> "ResultCache":
        return cls(
            cache_dir=config.cache_dir,
            ttl_seconds=config.cache_ttl_seconds,
            size_limit_bytes=config.cache_size_limit_bytes,
            enabled=config.cache_enabled,
        )

    @staticmethod
    def make_key(kind: str, repository: str, config_hash: str = "", **params: Any) -> str:
        """
        Generate a cache key.

        Args:
            kind: Result kind ("snapshot", "history", ...)
            repository: Canonical ``owner/name``
            config_hash: Hash of output-affecting settings
            **params: Extra request parameters (e.g. commit count)

        Returns:
            Hex digest key
        """
        key_data = json.dumps(
            {"kind": kind, "repo": repository.lower(), "config": config_hash, **params},
            sort_keys=True,
        )
        return hashlib.sha256(key_data.encode()).hexdigest()

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found/expired
        """
        if not self.enabled or self.cache is None:
            return None

        try:
            value = self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache get failed: {e}")
            return None

        if value is None:
            self.misses += 1
        else:
            self.hits += 1
            logger.debug(f"Cache hit: {key[:16]}...")
        return value

    def set(self, key: str, value: Any) -> None:
        if not self.enabled or self.cache is None:
            return

        expire = self.ttl_seconds or None
        try:
            self.cache.set(key, value, expire=expire)
            logger.debug(f"Cache set: {key[:16]}...")
        except Exception as e:
            logger.warning(f"Cache set failed: {e}")

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value for key, computing and storing it on a miss.

        Exceptions from compute propagate and nothing is stored.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        value = compute()
        self.set(key, value)
        return value

    def clear(self) -> None:
        """Clear all cache entries."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.clear()
            logger.info("Cache cleared")
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        if not self.enabled or self.cache is None:
            return {"enabled": False}

        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
                "hits": self.hits,
                "misses": self.misses,
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self.cache is not None:
            self.cache.close()
