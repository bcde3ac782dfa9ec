"""
Quote Service - Main Application.

Stores quotes in PostgreSQL and serves them over HTTP:
- Draft, cite, overwrite (undo) and remove quotes by id
- List quotes oldest first, three per page, with one-time page tokens
- Reset the store
"""

from contextlib import asynccontextmanager

import redis.asyncio as redis
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import settings
from .database import close_db_pool, get_db_pool, run_migrations
from .dependencies import set_quote_service
from .exceptions import (
    DuplicateQuoteException,
    InvalidPageTokenException,
    InvalidQuoteException,
    QuoteNotFoundException,
    QuoteServiceException,
)
from .logging_config import setup_logging
from .metrics import track_request_metrics
from .metrics_middleware import PrometheusMiddleware
from .middleware import RequestLoggingMiddleware
from .repositories import (
    IPageTokenStore,
    MemoryPageTokenStore,
    PostgresQuoteRepository,
    RedisPageTokenStore,
)
from .routers import health_router, quotes_router
from .services.quotes_service import QuoteService
from .tracing import configure_opentelemetry, instrument_fastapi

setup_logging(settings.LOG_LEVEL, use_json=settings.LOG_JSON)

logger = structlog.get_logger(__name__)

tracing_enabled = configure_opentelemetry(
    service_name=settings.SERVICE_NAME,
    service_version=settings.SERVICE_VERSION,
    otlp_endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
    enable_tracing=settings.ENABLE_TRACING,
)


def build_token_store() -> IPageTokenStore:
    """Create the page token store selected by REDIS_URL."""
    if settings.REDIS_URL:
        logger.info("Using Redis page token store")
        client = redis.from_url(settings.REDIS_URL)
        return RedisPageTokenStore(client, ttl_seconds=settings.PAGE_TOKEN_TTL_SECONDS)

    logger.info("REDIS_URL not set, using in-memory page token store")
    return MemoryPageTokenStore(ttl_seconds=settings.PAGE_TOKEN_TTL_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Quote Service", version=settings.SERVICE_VERSION)
    pool = await get_db_pool()
    try:
        await run_migrations(pool)
        token_store = build_token_store()
    except Exception:
        logger.error("Quote Service startup failed", exc_info=True)
        await close_db_pool()
        raise
    set_quote_service(QuoteService(PostgresQuoteRepository(pool), token_store))
    logger.info("Quote Service started")

    yield

    # Shutdown
    logger.info("Shutting down Quote Service")
    set_quote_service(None)
    if isinstance(token_store, RedisPageTokenStore):
        await token_store.close()
    await close_db_pool()
    logger.info("Quote Service stopped")


app = FastAPI(
    title="Quote Service",
    description="Store, cite and page through quotes",
    version=settings.SERVICE_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Request-ID"],
    expose_headers=["Content-Length", "X-Request-ID"],
    max_age=600,
)
app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)
app.add_middleware(RequestLoggingMiddleware)

if tracing_enabled:
    instrument_fastapi(app)

app.include_router(health_router.router)
app.include_router(quotes_router.router, prefix=settings.QUOTES_PREFIX)


@app.exception_handler(QuoteNotFoundException)
async def quote_not_found_handler(request: Request, exc: QuoteNotFoundException):
    logger.info("Quote not found", path=request.url.path, **exc.details)
    return Response(status_code=status.HTTP_404_NOT_FOUND)


@app.exception_handler(InvalidPageTokenException)
async def invalid_page_token_handler(request: Request, exc: InvalidPageTokenException):
    return Response(status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(DuplicateQuoteException)
async def duplicate_quote_handler(request: Request, exc: DuplicateQuoteException):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": exc.message, "error_code": "duplicate_quote"},
    )


@app.exception_handler(InvalidQuoteException)
async def invalid_quote_handler(request: Request, exc: InvalidQuoteException):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "error_code": "invalid_quote"},
    )


@app.exception_handler(QuoteServiceException)
async def quote_service_exception_handler(request: Request, exc: QuoteServiceException):
    """Database and token store failures."""
    logger.error(
        "Quote service error",
        path=request.url.path,
        method=request.method,
        error=exc.message,
        details=exc.details,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed path parameters (quote ids) are a bad request, not 422."""
    if any(error.get("loc", ())[:1] == ("path",) for error in exc.errors()):
        return Response(status_code=status.HTTP_400_BAD_REQUEST)
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "quote_service.app:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
