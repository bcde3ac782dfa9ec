"""Business logic layer."""

from .quotes_service import PAGE_SIZE, QuoteService, generate_page_token

__all__ = ["PAGE_SIZE", "QuoteService", "generate_page_token"]
