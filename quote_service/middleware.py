"""
Request logging middleware.

Binds a request id to the logging context, logs request start and
completion with latency, and echoes the id on the response. Unhandled
errors become a 500 here so the id is echoed on failures as well.
"""

import time
from typing import Callable

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import clear_request_id, set_request_id

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and response with timing and request id.

    Request headers are logged at debug level only.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=str(request.query_params),
            client_host=request.client.host if request.client else None,
        )
        logger.debug("Request headers", headers=dict(request.headers))

        try:
            response = await call_next(request)
        except Exception as exc:
            latency_us = int((time.perf_counter() - start_time) * 1_000_000)
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                latency_us=latency_us,
                error=str(exc),
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={"detail": "An unexpected error occurred"},
                headers={REQUEST_ID_HEADER: request_id},
            )
        else:
            latency_us = int((time.perf_counter() - start_time) * 1_000_000)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                latency_us=latency_us,
            )
            return response
        finally:
            clear_request_id()
