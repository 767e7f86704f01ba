"""
Read-through cache for list responses.

Implements:
- Redis-backed storage when REDIS_URL is set and reachable
- In-memory fallback with per-key expiry
- Prefix invalidation after writes

Values are JSON-serialisable payloads (already rendered views), so a
hit never touches the database.
"""

import json
import logging
import time
from typing import Any, Callable, Optional

import redis

logger = logging.getLogger(__name__)


class CacheClient:
    """Redis-backed cache for rendered list payloads.

    Falls back to an in-memory dict if Redis is not configured or unavailable.
    """

    def __init__(self, redis_url: Optional[str] = None, default_ttl: int = 180) -> None:
        self._default_ttl = default_ttl
        self._redis: Optional[redis.Redis] = None
        self._memory_cache: dict[str, tuple[float, str]] = {}

        if redis_url:
            try:
                self._redis = redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_timeout=5,
                )
                self._redis.ping()
                logger.info("Connected to Redis at %s", redis_url)
            except redis.RedisError:
                logger.warning("Cannot connect to Redis. Using in-memory cache.")
                self._redis = None

    @property
    def backend(self) -> str:
        return "redis" if self._redis is not None else "memory"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str) -> Any:
        """Return the cached value for key, or None on a miss."""
        if self._redis is not None:
            try:
                val = self._redis.get(key)
                return json.loads(val) if val is not None else None
            except redis.RedisError:
                logger.warning("Redis GET failed for key %s", key)
                return None

        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        expires_at, serialized = entry
        if expires_at <= time.monotonic():
            del self._memory_cache[key]
            return None
        return json.loads(serialized)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value with a TTL in seconds (default_ttl when omitted).

        A ttl of 0 or less stores nothing.
        """
        ttl = ttl if ttl is not None else self._default_ttl
        if ttl <= 0:
            return
        serialized = json.dumps(value, default=str)
        if self._redis is not None:
            try:
                self._redis.setex(key, ttl, serialized)
            except redis.RedisError:
                logger.warning("Redis SET failed for key %s", key)
            return
        self._memory_cache[key] = (time.monotonic() + ttl, serialized)

    def get_or_set(
        self, key: str, factory: Callable[[], Any], ttl: Optional[int] = None
    ) -> Any:
        """Return the cached value, computing and storing it on a miss."""
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached
        value = factory()
        self.set(key, value, ttl)
        return value

    def invalidate(self, prefix: str) -> int:
        """Delete every key starting with prefix.

        Returns:
            Number of keys invalidated.
        """
        if self._redis is not None:
            try:
                keys = list(self._redis.scan_iter(match=f"{prefix}*"))
                if keys:
                    self._redis.delete(*keys)
                return len(keys)
            except redis.RedisError:
                logger.warning("Redis DELETE failed for prefix %s", prefix)
                return 0

        to_delete = [k for k in self._memory_cache if k.startswith(prefix)]
        for k in to_delete:
            del self._memory_cache[k]
        return len(to_delete)

    def clear(self) -> None:
        """Drop every in-memory entry. Redis keys are left to expire."""
        self._memory_cache.clear()
