"""Database connection management."""

from importlib import resources

import asyncpg
import structlog

from quote_service.config import settings

logger = structlog.get_logger(__name__)

MIGRATIONS_PACKAGE = "quote_service.migrations"

# Global connection pool
_pool: asyncpg.Pool | None = None


async def get_db_pool() -> asyncpg.Pool:
    """
    Get or create database connection pool.

    Returns:
        asyncpg.Pool: Database connection pool
    """
    global _pool

    if _pool is None:
        logger.info("Creating database connection pool")
        _pool = await asyncpg.create_pool(
            settings.DATABASE_URL,
            min_size=settings.DATABASE_POOL_MIN_SIZE,
            max_size=settings.DATABASE_POOL_MAX_SIZE,
            command_timeout=settings.DATABASE_COMMAND_TIMEOUT,
            statement_cache_size=0,  # Required behind pgbouncer
        )
        logger.info("Database connection pool created")

    return _pool


async def close_db_pool():
    """Close database connection pool."""
    global _pool

    if _pool is not None:
        logger.info("Closing database connection pool")
        await _pool.close()
        _pool = None
        logger.info("Database connection pool closed")


def load_migrations() -> list[tuple[str, str]]:
    """
    Read the bundled SQL migrations in file name order.

    Returns:
        List of (file name, SQL text) pairs
    """
    files = [
        entry
        for entry in resources.files(MIGRATIONS_PACKAGE).iterdir()
        if entry.name.endswith(".sql")
    ]
    return [
        (entry.name, entry.read_text(encoding="utf-8"))
        for entry in sorted(files, key=lambda e: e.name)
    ]


async def run_migrations(pool: asyncpg.Pool) -> int:
    """
    Apply the bundled schema files.

    Every file is written to be idempotent (CREATE ... IF NOT EXISTS),
    so running them on each startup is safe.

    Returns:
        Number of files applied
    """
    migrations = load_migrations()
    async with pool.acquire() as conn:
        for name, sql in migrations:
            logger.info("Applying migration", migration=name)
            await conn.execute(sql)
    logger.info("Migrations applied", count=len(migrations))
    return len(migrations)
