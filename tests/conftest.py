"""
Test configuration and fixtures.

The HTTP tests run the real app through httpx's ASGI transport with the
quote service dependency overridden, so no PostgreSQL or Redis is needed.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from quote_service.app import app
from quote_service.dependencies import get_quote_service
from quote_service.models import Quote
from quote_service.repositories import IQuoteRepository, MemoryPageTokenStore
from quote_service.services import QuoteService


class InMemoryQuoteRepository(IQuoteRepository):
    """Dict-backed repository mirroring the PostgreSQL semantics."""

    def __init__(self):
        self.quotes: Dict[UUID, Quote] = {}
        self._clock = datetime(2023, 12, 19, 12, 0, tzinfo=timezone.utc)

    async def reset(self) -> None:
        self.quotes.clear()

    async def get(self, quote_id: UUID) -> Optional[Quote]:
        return self.quotes.get(quote_id)

    async def delete(self, quote_id: UUID) -> Optional[Quote]:
        return self.quotes.pop(quote_id, None)

    async def update(self, quote_id: UUID, author: str, quote: str) -> Optional[Quote]:
        existing = self.quotes.get(quote_id)
        if existing is None:
            return None
        updated = existing.model_copy(
            update={"author": author, "quote": quote, "version": existing.version + 1}
        )
        self.quotes[quote_id] = updated
        return updated

    async def create(self, author: str, quote: str) -> Quote:
        self._clock += timedelta(seconds=1)
        stored = Quote(
            id=uuid4(), author=author, quote=quote, created_at=self._clock, version=1
        )
        self.quotes[stored.id] = stored
        return stored

    async def list(self, limit: int, offset: int) -> List[Quote]:
        ordered = sorted(self.quotes.values(), key=lambda q: (q.created_at, q.id))
        return ordered[offset : offset + limit]

    async def ping(self) -> bool:
        return True


@pytest.fixture
def quote_repo():
    """Empty in-memory quote repository."""
    return InMemoryQuoteRepository()


class FakeClock:
    """Manually advanced monotonic clock for TTL expiry."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Clock driving the page token store."""
    return FakeClock()


@pytest.fixture
def token_store(clock):
    """In-memory page token store with a 60 second TTL."""
    return MemoryPageTokenStore(ttl_seconds=60, timer=clock)


@pytest.fixture
def quote_service(quote_repo, token_store):
    """Quote service wired to in-memory backends."""
    return QuoteService(quote_repo, token_store)


@pytest_asyncio.fixture
async def client(quote_service):
    """HTTP client for the app with the quote service overridden."""
    app.dependency_overrides[get_quote_service] = lambda: quote_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_draft():
    """Sample quote body."""
    return {"author": "Santa", "quote": "Ho ho ho!"}
