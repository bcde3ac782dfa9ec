"""
PostgreSQL implementation of the quote repository.

Runs plain SQL through an asyncpg pool against the ``quotes`` table.
"""

import time
from typing import List, Optional
from uuid import UUID

import asyncpg
import structlog

from ..exceptions import DatabaseException, DuplicateQuoteException, InvalidQuoteException
from ..metrics import track_db_operation
from ..models import Quote
from .quote_repository import IQuoteRepository

logger = structlog.get_logger(__name__)

QUOTE_COLUMNS = "id, author, quote, created_at, version"


class PostgresQuoteRepository(IQuoteRepository):
    """PostgreSQL implementation for quote persistence."""

    def __init__(self, pool: asyncpg.Pool):
        """
        Initialize repository.

        Args:
            pool: asyncpg connection pool
        """
        self.pool = pool

    async def reset(self) -> None:
        result = await self._run("reset", "execute", "DELETE FROM quotes")
        logger.info("Quotes table cleared", result=result)

    async def get(self, quote_id: UUID) -> Optional[Quote]:
        row = await self._run(
            "get",
            "fetchrow",
            f"SELECT {QUOTE_COLUMNS} FROM quotes WHERE id = $1",
            quote_id,
        )
        return self._to_quote(row)

    async def delete(self, quote_id: UUID) -> Optional[Quote]:
        row = await self._run(
            "delete",
            "fetchrow",
            f"DELETE FROM quotes WHERE id = $1 RETURNING {QUOTE_COLUMNS}",
            quote_id,
        )
        return self._to_quote(row)

    async def update(self, quote_id: UUID, author: str, quote: str) -> Optional[Quote]:
        row = await self._run(
            "update",
            "fetchrow",
            f"""
            UPDATE quotes
            SET author = $1, quote = $2, version = version + 1
            WHERE id = $3
            RETURNING {QUOTE_COLUMNS}
            """,
            author,
            quote,
            quote_id,
        )
        return self._to_quote(row)

    async def create(self, author: str, quote: str) -> Quote:
        row = await self._run(
            "create",
            "fetchrow",
            f"INSERT INTO quotes (author, quote) VALUES ($1, $2) RETURNING {QUOTE_COLUMNS}",
            author,
            quote,
        )
        if row is None:
            raise DatabaseException("create", "insert returned no row")
        return self._to_quote(row)

    async def list(self, limit: int, offset: int) -> List[Quote]:
        rows = await self._run(
            "list",
            "fetch",
            f"""
            SELECT {QUOTE_COLUMNS}
            FROM quotes
            ORDER BY created_at ASC, id ASC
            LIMIT $1 OFFSET $2
            """,
            limit,
            offset,
        )
        return [self._to_quote(row) for row in rows]

    async def ping(self) -> bool:
        try:
            return await self.pool.fetchval("SELECT 1") == 1
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.warning("Database ping failed", error=str(e))
            return False

    async def _run(self, operation: str, method: str, query: str, *args):
        """
        Execute query with the pool method named by method.

        Translates driver errors into domain exceptions and records
        per-operation metrics.
        """
        start_time = time.perf_counter()
        success = False
        try:
            result = await getattr(self.pool, method)(query, *args)
            success = True
            return result
        except asyncpg.UniqueViolationError as e:
            logger.warning("Duplicate quote", operation=operation, error=str(e))
            raise DuplicateQuoteException(getattr(e, "detail", None) or str(e)) from e
        except asyncpg.NotNullViolationError as e:
            column = getattr(e, "column_name", None) or "unknown"
            logger.warning("Quote column missing", operation=operation, column=column)
            raise InvalidQuoteException(column, None, "must not be null") from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error("Database operation failed", operation=operation, error=str(e))
            raise DatabaseException(operation, str(e)) from e
        finally:
            track_db_operation(operation, success, time.perf_counter() - start_time)

    @staticmethod
    def _to_quote(row) -> Optional[Quote]:
        if row is None:
            return None
        return Quote(
            id=row["id"],
            author=row["author"],
            quote=row["quote"],
            created_at=row["created_at"],
            version=row["version"],
        )
