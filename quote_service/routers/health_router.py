"""
Health check and monitoring router.

Provides endpoints for liveness, readiness and metrics.
"""

import structlog
from fastapi import APIRouter, Depends, Response, status

from ..config import settings
from ..dependencies import get_quote_service
from ..metrics import metrics_endpoint
from ..models import HealthResponse, ReadinessResponse
from ..services.quotes_service import QuoteService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check():
    """
    Basic health check.

    Always returns 200 OK if the service is running.
    """
    return HealthResponse(
        status="healthy",
        service=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "A dependency is unavailable"}},
    summary="Readiness check",
)
async def readiness_check(
    response: Response,
    service: QuoteService = Depends(get_quote_service),
):
    """
    Readiness check.

    Checks the PostgreSQL database and the page token store.
    Returns 503 if either is unavailable.
    """
    checks = await service.check_dependencies()
    ready = all(check == "healthy" for check in checks.values())

    if not ready:
        logger.warning("Readiness check failed", checks=checks)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(ready=ready, checks=checks)


@router.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    return await metrics_endpoint()
