"""
Custom exceptions for the quote service domain.

These exceptions represent domain-level errors and are independent
of infrastructure concerns (HTTP, database driver, etc.).
"""

from typing import Any, Optional
from uuid import UUID


class QuoteServiceException(Exception):
    """Base exception for all quote service errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class QuoteNotFoundException(QuoteServiceException):
    """Raised when no quote exists for the given id."""

    def __init__(self, quote_id: UUID):
        super().__init__(
            message=f"Quote not found: {quote_id}",
            details={"id": str(quote_id)},
        )


class InvalidPageTokenException(QuoteServiceException):
    """Raised when a page token is unknown, expired or already used."""

    def __init__(self, token: str):
        super().__init__(
            message=f"Invalid page token: {token}",
            details={"token": token},
        )


class DuplicateQuoteException(QuoteServiceException):
    """Raised when a quote id collides with an existing row."""

    def __init__(self, reason: Optional[str] = None):
        message = "Quote already exists"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, details={"reason": reason})


class InvalidQuoteException(QuoteServiceException):
    """Raised when a quote violates a column constraint."""

    def __init__(self, field: str, value: Any, reason: str):
        message = f"Invalid quote {field}: {reason}"
        super().__init__(
            message=message,
            details={"field": field, "value": str(value), "reason": reason},
        )


class DatabaseException(QuoteServiceException):
    """Raised when a database operation fails."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Database {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message, details={"operation": operation, "reason": reason}
        )


class PageTokenStoreException(QuoteServiceException):
    """Raised when the page token store is unreachable."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Page token {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message, details={"operation": operation, "reason": reason}
        )
