"""
Redis caching for read-mostly lookups (business summaries, client details).
The portal keeps working without Redis; every call degrades to a miss.
"""
import redis
import json
import logging
from typing import Optional, Any

from portal.core.config import settings

logger = logging.getLogger(__name__)


class RedisCache:
    """Redis cache manager with connection pooling."""

    def __init__(self, url: Optional[str] = None):
        self._url = url or settings.REDIS_URL
        self._pool: Optional[redis.ConnectionPool] = None
        self._client: Optional[redis.Redis] = None
        self._connected = False

    def connect(self):
        """
        Connect to Redis server.
        Safe to call multiple times - will reuse existing connection.
        """
        if self._connected and self._client:
            return

        try:
            self._pool = redis.ConnectionPool.from_url(
                self._url,
                max_connections=20,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            self._client = redis.Redis(connection_pool=self._pool)
            self._client.ping()
            self._connected = True
            logger.info("Redis cache connected")
        except redis.RedisError as e:
            logger.warning(f"Redis connection failed: {e}. Caching disabled.")
            self._connected = False
            self._client = None

    def disconnect(self):
        """Disconnect from Redis."""
        if self._pool:
            self._pool.disconnect()
        self._connected = False
        self._client = None
        logger.info("Redis cache disconnected")

    @property
    def is_connected(self) -> bool:
        return self._connected and self._client is not None

    def ping(self) -> bool:
        if not self.is_connected:
            return False
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def get(self, key: str) -> Optional[Any]:
        """Get a JSON value from cache, None on miss or error"""
        if not self.is_connected:
            return None

        try:
            value = self._client.get(key)
            if value is None:
                return None
            return json.loads(value)
        except (redis.RedisError, json.JSONDecodeError) as e:
            logger.warning(f"Redis GET error for key '{key}': {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Store a JSON-serialisable value with a TTL in seconds"""
        if not self.is_connected:
            return False

        try:
            self._client.setex(key, ttl, json.dumps(value, default=str))
            return True
        except (redis.RedisError, TypeError) as e:
            logger.warning(f"Redis SET error for key '{key}': {e}")
            return False


# Global cache instance, connected on application startup
cache = RedisCache()


def business_cache_key(business_id: str) -> str:
    return f"business:{business_id}"
