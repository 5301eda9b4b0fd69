"""Fixed-window request rate limiter backed by Redis."""

import logging
from dataclasses import dataclass

from .redis_client import RedisClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    """
    Outcome of one rate limit check.

    Attributes:
        allowed: Whether the request may proceed
        limit: Maximum requests per window
        remaining: Requests left in the current window
        retry_after: Seconds until the window resets
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after: int


class RateLimiter:
    """
    Counts requests per client in fixed windows.

    Fails open: when Redis cannot be reached every request is allowed.
    """

    def __init__(
        self,
        redis_client: RedisClient,
        max_requests: int = 100,
        window_seconds: int = 900,
        prefix: str = "ratelimit",
    ):
        """
        Initialize rate limiter.

        Args:
            redis_client: Redis client holding the counters
            max_requests: Maximum requests per window
            window_seconds: Window length in seconds
            prefix: Counter key prefix
        """
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._prefix = prefix

    def _key(self, identifier: str) -> str:
        return f"{self._prefix}:{identifier}"

    async def check(self, identifier: str) -> RateLimitResult:
        """
        Count a request from ``identifier`` and decide whether to allow it.

        Args:
            identifier: Client identity, usually the remote address

        Returns:
            Rate limit decision
        """
        counted = await self._redis.increment_window(self._key(identifier), self._window_seconds)
        if counted is None:
            return RateLimitResult(
                allowed=True,
                limit=self._max_requests,
                remaining=self._max_requests,
                retry_after=0,
            )

        count, ttl = counted
        allowed = count <= self._max_requests
        if not allowed:
            logger.warning("Rate limit exceeded for %s", identifier)

        return RateLimitResult(
            allowed=allowed,
            limit=self._max_requests,
            remaining=max(self._max_requests - count, 0),
            retry_after=max(ttl, 0),
        )
