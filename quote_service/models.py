"""Pydantic models for request/response validation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    """Stored quote."""

    id: UUID
    author: str
    quote: str
    created_at: datetime
    version: int = Field(..., ge=1)

    model_config = ConfigDict(from_attributes=True)


class QuoteDraft(BaseModel):
    """Request body for drafting or overwriting a quote."""

    author: str = Field(..., description="Who said it")
    quote: str = Field(..., description="What was said")


class QuoteListResponse(BaseModel):
    """One page of quotes."""

    quotes: list[Quote]
    page: int = Field(..., ge=1)
    next_token: Optional[str] = Field(
        None, description="One-time token for the following page"
    )


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    ready: bool
    checks: dict[str, str]


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str
    error_code: Optional[str] = None
