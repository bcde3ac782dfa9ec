"""Repository layer for quotes and page tokens."""

from .page_token_store import MemoryPageTokenStore
from .postgres_repository import PostgresQuoteRepository
from .quote_repository import IPageTokenStore, IQuoteRepository
from .redis_repository import RedisPageTokenStore

__all__ = [
    "IPageTokenStore",
    "IQuoteRepository",
    "MemoryPageTokenStore",
    "PostgresQuoteRepository",
    "RedisPageTokenStore",
]
