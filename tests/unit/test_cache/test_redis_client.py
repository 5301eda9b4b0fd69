"""Tests for Redis client implementation."""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

from redis.exceptions import ConnectionError as RedisConnectionError

from socialhub.infrastructure.cache.redis_client import RedisClient


@pytest.fixture
def redis_client():
    """Create Redis client for testing."""
    return RedisClient("redis://localhost:6379/15")


@pytest.fixture
def mock_redis():
    """Create mock Redis connection."""
    return AsyncMock()


def pipeline_returning(mock_redis, results):
    """Attach a transaction pipeline whose execute() yields ``results``."""
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=results)
    mock_redis.pipeline = MagicMock(return_value=pipe)
    return pipe


class TestRedisClient:
    """Test cases for RedisClient."""

    @pytest.mark.asyncio
    async def test_connect_success(self, redis_client):
        with patch('redis.asyncio.from_url') as mock_from_url:
            mock_redis = AsyncMock()
            mock_from_url.return_value = mock_redis

            await redis_client.connect()
            await redis_client.connect()

            assert redis_client._redis == mock_redis
            mock_from_url.assert_called_once()

    @pytest.mark.asyncio
    async def test_disconnect(self, redis_client, mock_redis):
        redis_client._redis = mock_redis

        await redis_client.disconnect()

        mock_redis.aclose.assert_called_once()
        assert redis_client._redis is None

    @pytest.mark.asyncio
    async def test_increment_window_first_hit_creates_counter_with_expiry(
        self, redis_client, mock_redis
    ):
        pipe = pipeline_returning(mock_redis, [True, 1, 900])
        redis_client._redis = mock_redis

        result = await redis_client.increment_window("ratelimit:1.2.3.4", 900)

        assert result == (1, 900)
        mock_redis.pipeline.assert_called_once_with(transaction=True)
        pipe.set.assert_called_once_with("ratelimit:1.2.3.4", 0, ex=900, nx=True)
        pipe.incr.assert_called_once_with("ratelimit:1.2.3.4")
        pipe.ttl.assert_called_once_with("ratelimit:1.2.3.4")
        mock_redis.expire.assert_not_called()

    @pytest.mark.asyncio
    async def test_increment_window_later_hit_reports_ttl(self, redis_client, mock_redis):
        pipe = pipeline_returning(mock_redis, [None, 5, 120])
        redis_client._redis = mock_redis

        result = await redis_client.increment_window("counter", timedelta(minutes=15))

        assert result == (5, 120)
        pipe.set.assert_called_once_with("counter", 0, ex=900, nx=True)
        mock_redis.expire.assert_not_called()

    @pytest.mark.asyncio
    async def test_increment_window_repairs_missing_expiry(self, redis_client, mock_redis):
        pipeline_returning(mock_redis, [None, 3, -1])
        redis_client._redis = mock_redis

        result = await redis_client.increment_window("counter", 60)

        assert result == (3, 60)
        mock_redis.expire.assert_called_once_with("counter", 60)

    @pytest.mark.asyncio
    async def test_increment_window_when_unreachable(self, redis_client, mock_redis):
        pipe = pipeline_returning(mock_redis, None)
        pipe.execute.side_effect = RedisConnectionError("Connection refused")
        redis_client._redis = mock_redis

        assert await redis_client.increment_window("counter", 60) is None

    @pytest.mark.asyncio
    async def test_ping_success(self, redis_client, mock_redis):
        mock_redis.ping.return_value = True
        redis_client._redis = mock_redis

        assert await redis_client.ping() is True

    @pytest.mark.asyncio
    async def test_ping_failure(self, redis_client, mock_redis):
        mock_redis.ping.side_effect = RedisConnectionError("Connection refused")
        redis_client._redis = mock_redis

        assert await redis_client.ping() is False

