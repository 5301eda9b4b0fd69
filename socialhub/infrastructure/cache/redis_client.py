"""Redis client wrapper."""

import logging
from datetime import timedelta
from typing import Optional, Tuple, Union

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from socialhub.settings import get_settings

logger = logging.getLogger(__name__)


class RedisClient:
    """
    Async Redis client with lazy connection setup.

    Operations report Redis being unreachable through their return value
    instead of raising, so callers can degrade gracefully.
    """

    def __init__(self, redis_url: Optional[str] = None):
        """
        Initialize Redis client.

        Args:
            redis_url: Redis connection URL (defaults to settings)
        """
        self._redis: Optional[Redis] = None
        self._redis_url = redis_url or get_settings().redis_url

    async def connect(self) -> None:
        """Create the connection pool if it does not exist yet."""
        if self._redis is None:
            self._redis = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
                max_connections=20,
                retry_on_timeout=True,
                socket_connect_timeout=2,
                socket_keepalive=True,
            )

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def increment_window(
        self, key: str, window: Union[int, timedelta]
    ) -> Optional[Tuple[int, int]]:
        """
        Count one hit in a fixed window.

        The counter is created together with its expiry (``SET NX EX``) and
        incremented in the same transaction, so the window starts with the
        first request and a key never outlives it.

        Args:
            key: Counter key
            window: Window length (seconds or timedelta)

        Returns:
            Tuple of (hits in current window, seconds until reset), or None
            if Redis is unreachable
        """
        if isinstance(window, timedelta):
            window = int(window.total_seconds())

        await self.connect()
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.set(key, 0, ex=window, nx=True)
            pipe.incr(key)
            pipe.ttl(key)
            _, count, ttl = await pipe.execute()

            # Counters left without a TTL by an earlier deployment
            if ttl < 0:
                await self._redis.expire(key, window)
                ttl = window
            return count, ttl
        except (RedisError, OSError):
            logger.warning("Redis unavailable while counting %s", key)
            return None

    async def ping(self) -> bool:
        """
        Ping Redis server to check connectivity.

        Returns:
            True if Redis is responsive, False otherwise
        """
        await self.connect()
        try:
            response = await self._redis.ping()
            return response is True
        except (RedisError, OSError):
            return False


_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """
    Get global Redis client instance.

    Returns:
        RedisClient: Global Redis client
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client


async def close_redis_connection() -> None:
    """Close global Redis connection."""
    global _redis_client
    if _redis_client:
        await _redis_client.disconnect()
        _redis_client = None
