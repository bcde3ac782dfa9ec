"""
Repository interfaces (Abstract Base Classes).

Define the contracts for quote persistence and page token storage
independent of the underlying storage mechanism.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from ..models import Quote


class IQuoteRepository(ABC):
    """
    Abstract repository interface for quote operations.

    Methods that address a single quote return None when no row
    matches the id; they never raise for a missing quote.
    """

    @abstractmethod
    async def reset(self) -> None:
        """Delete every stored quote."""
        pass

    @abstractmethod
    async def get(self, quote_id: UUID) -> Optional[Quote]:
        """
        Find quote by id.

        Args:
            quote_id: Quote identifier

        Returns:
            Quote if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete(self, quote_id: UUID) -> Optional[Quote]:
        """
        Delete quote by id.

        Returns:
            The deleted quote, None if no quote had that id
        """
        pass

    @abstractmethod
    async def update(self, quote_id: UUID, author: str, quote: str) -> Optional[Quote]:
        """
        Overwrite author and text of a quote and bump its version.

        Returns:
            The updated quote, None if no quote had that id
        """
        pass

    @abstractmethod
    async def create(self, author: str, quote: str) -> Quote:
        """
        Insert a new quote.

        Id, creation time and version (1) come from column defaults.

        Returns:
            The stored quote
        """
        pass

    @abstractmethod
    async def list(self, limit: int, offset: int) -> List[Quote]:
        """
        List quotes oldest first.

        Args:
            limit: Maximum number of quotes
            offset: Number of quotes to skip

        Returns:
            Quotes ordered by creation time
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the backing store answers."""
        pass


class IPageTokenStore(ABC):
    """
    Abstract store for one-time pagination tokens.

    A token maps to the page number it unlocks and can be consumed once.
    """

    @abstractmethod
    async def save(self, token: str, page: int) -> None:
        """Store token for page."""
        pass

    @abstractmethod
    async def consume(self, token: str) -> Optional[int]:
        """
        Return the page for token and forget the token.

        Returns:
            Page number, None if the token is unknown, expired or used
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Forget every stored token."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the backing store answers."""
        pass
