"""
Quote router.

Endpoints:
- POST   /reset        wipe quotes and page tokens
- GET    /cite/{id}    fetch one quote
- DELETE /remove/{id}  delete one quote, returning it
- PUT    /undo/{id}    overwrite a quote, bumping its version
- POST   /draft        create a quote
- GET    /list         paginated listing with one-time tokens

Unknown ids and invalid tokens are raised as domain exceptions and
mapped to empty 404/400 responses by the app's exception handlers.
"""

from typing import Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Query, Response, status

from ..dependencies import get_quote_service
from ..exceptions import QuoteServiceException
from ..models import ErrorResponse, Quote, QuoteDraft, QuoteListResponse
from ..services.quotes_service import QuoteService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["quotes"])


@router.post(
    "/reset",
    status_code=status.HTTP_200_OK,
    responses={500: {"description": "Reset failed"}},
    summary="Delete all quotes",
)
async def reset(service: QuoteService = Depends(get_quote_service)):
    """Delete every quote and invalidate all outstanding page tokens."""
    try:
        await service.reset()
    except QuoteServiceException as e:
        logger.error("Reset failed", error=e.message)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/cite/{quote_id}",
    response_model=Quote,
    responses={404: {"description": "Quote not found"}},
    summary="Get a quote",
)
async def cite(quote_id: UUID, service: QuoteService = Depends(get_quote_service)):
    return await service.cite(quote_id)


@router.delete(
    "/remove/{quote_id}",
    response_model=Quote,
    responses={404: {"description": "Quote not found"}},
    summary="Delete a quote",
)
async def remove(quote_id: UUID, service: QuoteService = Depends(get_quote_service)):
    """Delete a quote and return what was stored."""
    return await service.remove(quote_id)


@router.put(
    "/undo/{quote_id}",
    response_model=Quote,
    responses={
        404: {"description": "Quote not found"},
        422: {"description": "Invalid quote", "model": ErrorResponse},
    },
    summary="Overwrite a quote",
)
async def undo(
    quote_id: UUID,
    draft: QuoteDraft,
    service: QuoteService = Depends(get_quote_service),
):
    """
    Replace author and text of a quote.

    The version counter is incremented; id and creation time are kept.
    """
    return await service.undo(quote_id, draft)


@router.post(
    "/draft",
    response_model=Quote,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Quote already exists", "model": ErrorResponse},
        422: {"description": "Invalid quote", "model": ErrorResponse},
    },
    summary="Create a quote",
)
async def draft(draft: QuoteDraft, service: QuoteService = Depends(get_quote_service)):
    return await service.draft(draft)


@router.get(
    "/list",
    response_model=QuoteListResponse,
    responses={400: {"description": "Invalid or already used page token"}},
    summary="List quotes",
)
async def list_quotes(
    token: Optional[str] = Query(None, description="Token from the previous page"),
    service: QuoteService = Depends(get_quote_service),
):
    """
    List quotes three at a time, oldest first.

    Pass the `next_token` of a response to get the following page.
    Each token works once.
    """
    return await service.list(token)
