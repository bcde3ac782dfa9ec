"""
Shared dependencies for the application.

Provides dependency injection functions used across routers.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .services.quotes_service import QuoteService

# Global service instance (set by main app)
_quote_service: Optional["QuoteService"] = None


def set_quote_service(service: Optional["QuoteService"]) -> None:
    """
    Set the global quote service instance.

    Called by the app lifespan during startup and cleared on shutdown.
    """
    global _quote_service
    _quote_service = service


async def get_quote_service() -> "QuoteService":
    """
    Get quote service instance for dependency injection.

    Used by all routers that need the quote service.
    """
    if _quote_service is None:
        raise RuntimeError("Quote service not initialized")
    return _quote_service
