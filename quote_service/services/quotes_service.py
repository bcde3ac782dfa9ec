"""
Quote service.

Orchestrates the quote repository and the page token store:
- CRUD over quotes with not-found reporting
- Paginated listing with one-time continuation tokens
- Reset of both the table and outstanding tokens
"""

import secrets
import string
from typing import Optional
from uuid import UUID

import structlog

from ..exceptions import InvalidPageTokenException, QuoteNotFoundException
from ..metrics import track_page_token, track_quote_operation
from ..models import Quote, QuoteDraft, QuoteListResponse
from ..repositories.quote_repository import IPageTokenStore, IQuoteRepository

logger = structlog.get_logger(__name__)

PAGE_SIZE = 3
TOKEN_LENGTH = 16
TOKEN_ALPHABET = string.ascii_letters + string.digits


def generate_page_token(length: int = TOKEN_LENGTH) -> str:
    """Return a random alphanumeric token."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


class QuoteService:
    """
    Quote operations used by the HTTP layer.

    Lookups by id raise QuoteNotFoundException instead of returning None
    so that routers map a single exception to 404.
    """

    def __init__(
        self,
        quote_repo: IQuoteRepository,
        token_store: IPageTokenStore,
        page_size: int = PAGE_SIZE,
    ):
        self.quote_repo = quote_repo
        self.token_store = token_store
        self.page_size = page_size

    async def reset(self) -> None:
        """Delete all quotes and invalidate every page token."""
        await self.quote_repo.reset()
        await self.token_store.clear()
        track_quote_operation("reset", "success")
        logger.info("Quotes reset")

    async def cite(self, quote_id: UUID) -> Quote:
        quote = await self.quote_repo.get(quote_id)
        return self._found("cite", quote_id, quote)

    async def remove(self, quote_id: UUID) -> Quote:
        quote = await self.quote_repo.delete(quote_id)
        quote = self._found("remove", quote_id, quote)
        logger.info("Quote removed", quote_id=str(quote_id))
        return quote

    async def undo(self, quote_id: UUID, draft: QuoteDraft) -> Quote:
        """Overwrite a quote with draft and bump its version."""
        quote = await self.quote_repo.update(quote_id, draft.author, draft.quote)
        quote = self._found("undo", quote_id, quote)
        logger.info("Quote updated", quote_id=str(quote_id), version=quote.version)
        return quote

    async def draft(self, draft: QuoteDraft) -> Quote:
        quote = await self.quote_repo.create(draft.author, draft.quote)
        track_quote_operation("draft", "success")
        logger.info("Quote drafted", quote_id=str(quote.id), author=quote.author)
        return quote

    async def list(self, token: Optional[str] = None) -> QuoteListResponse:
        """
        Return one page of quotes.

        Without a token the first page is returned. A token is exchanged
        for the page it was issued for and cannot be used again.

        Args:
            token: Continuation token from a previous page

        Returns:
            Page of quotes with the next token, if a further page exists

        Raises:
            InvalidPageTokenException: Token unknown, expired or already used
        """
        page = 1
        if token is not None:
            stored_page = await self.token_store.consume(token)
            if stored_page is None:
                track_page_token("rejected")
                track_quote_operation("list", "invalid_token")
                logger.warning("Rejected page token", token=token)
                raise InvalidPageTokenException(token)
            track_page_token("consumed")
            page = stored_page

        offset = (page - 1) * self.page_size
        quotes = await self.quote_repo.list(self.page_size + 1, offset)

        next_token = None
        if len(quotes) > self.page_size:
            next_token = generate_page_token()
            await self.token_store.save(next_token, page + 1)
            track_page_token("issued")

        track_quote_operation("list", "success")
        logger.debug(
            "Listed quotes",
            page=page,
            returned=min(len(quotes), self.page_size),
            has_next=next_token is not None,
        )
        return QuoteListResponse(
            quotes=quotes[: self.page_size],
            page=page,
            next_token=next_token,
        )

    async def check_dependencies(self) -> dict[str, str]:
        """Report health of the database and the token store."""
        database_ok = await self.quote_repo.ping()
        tokens_ok = await self.token_store.ping()
        return {
            "database": "healthy" if database_ok else "unhealthy",
            "page_tokens": "healthy" if tokens_ok else "unhealthy",
        }

    @staticmethod
    def _found(operation: str, quote_id: UUID, quote: Optional[Quote]) -> Quote:
        if quote is None:
            track_quote_operation(operation, "not_found")
            raise QuoteNotFoundException(quote_id)
        track_quote_operation(operation, "success")
        return quote
