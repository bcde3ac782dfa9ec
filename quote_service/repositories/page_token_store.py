"""
In-process page token store.

Used when no Redis URL is configured. Tokens live in a TTL cache, so
they expire the same way the Redis-backed tokens do.
"""

import asyncio
import time
from typing import Callable, Optional

import structlog
from cachetools import TTLCache  # type: ignore[import-untyped]

from .quote_repository import IPageTokenStore

logger = structlog.get_logger(__name__)


class MemoryPageTokenStore(IPageTokenStore):
    """
    TTL-cache backed token store.

    Attributes:
        tokens: Token to page mapping
        ttl_seconds: Lifetime of a token
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        max_size: int = 10000,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.tokens: TTLCache = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=timer)
        self.ttl_seconds = ttl_seconds
        self._lock = asyncio.Lock()
        logger.info(
            "Initialized in-memory page token store",
            ttl_seconds=ttl_seconds,
            max_size=max_size,
        )

    async def save(self, token: str, page: int) -> None:
        async with self._lock:
            self.tokens[token] = page

    async def consume(self, token: str) -> Optional[int]:
        async with self._lock:
            return self.tokens.pop(token, None)

    async def clear(self) -> None:
        async with self._lock:
            self.tokens.clear()

    async def ping(self) -> bool:
        return True
