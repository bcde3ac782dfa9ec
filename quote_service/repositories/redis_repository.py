"""
Redis implementation of the page token store.

Tokens are shared between service replicas and expire via key TTL.
"""

from typing import Optional

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from ..exceptions import PageTokenStoreException
from .quote_repository import IPageTokenStore

logger = structlog.get_logger(__name__)

KEY_PREFIX = "quote-page-token:"


class RedisPageTokenStore(IPageTokenStore):
    """
    Redis token store.

    Consumption uses GETDEL so that two concurrent requests holding the
    same token cannot both receive the page.
    """

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int = 3600):
        """
        Initialize Redis token store.

        Args:
            redis_client: Async Redis client
            ttl_seconds: Time-to-live for tokens (default: 1 hour)
        """
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    def _build_key(self, token: str) -> str:
        return f"{KEY_PREFIX}{token}"

    async def save(self, token: str, page: int) -> None:
        try:
            await self.redis.setex(self._build_key(token), self.ttl_seconds, page)
        except RedisError as e:
            logger.error("Error saving page token to Redis", error=str(e))
            raise PageTokenStoreException("save", str(e)) from e

    async def consume(self, token: str) -> Optional[int]:
        try:
            value = await self.redis.getdel(self._build_key(token))
        except RedisError as e:
            logger.error("Error consuming page token from Redis", error=str(e))
            raise PageTokenStoreException("consume", str(e)) from e

        if value is None:
            return None

        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed page token value", value=value)
            return None

    async def clear(self) -> None:
        try:
            keys = [key async for key in self.redis.scan_iter(match=f"{KEY_PREFIX}*")]
            if keys:
                await self.redis.delete(*keys)
            logger.info("Page tokens cleared", count=len(keys))
        except RedisError as e:
            logger.error("Error clearing page tokens from Redis", error=str(e))
            raise PageTokenStoreException("clear", str(e)) from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            logger.warning("Redis ping failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close the underlying Redis client."""
        await self.redis.aclose()
