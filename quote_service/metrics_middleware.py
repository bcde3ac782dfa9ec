"""
Metrics middleware for the FastAPI application.

Automatically tracks HTTP request metrics for all endpoints.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


def route_template(request: Request) -> str:
    """
    Rebuild the matched route template from the concrete path.

    Path segments that carry a path parameter are replaced by ``{name}``,
    walking from the end so a prefix segment never shadows a parameter.
    """
    if request.scope.get("route") is None:
        return "unmatched"

    remaining = {str(value): name for name, value in request.path_params.items()}
    segments = request.url.path.split("/")
    for index in range(len(segments) - 1, -1, -1):
        name = remaining.pop(segments[index], None)
        if name is not None:
            segments[index] = "{" + name + "}"
    return "/".join(segments)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track Prometheus metrics for every HTTP request.

    Requests are labelled with the route template (``/19/cite/{quote_id}``)
    rather than the concrete path, so quote ids never become label values.
    """

    def __init__(self, app, track_func: Callable):
        """
        Initialize the middleware.

        Args:
            app: FastAPI application
            track_func: Function to call for tracking metrics (method, endpoint, status, duration)
        """
        super().__init__(app)
        self.track_func = track_func

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start_time

        endpoint = route_template(request)

        self.track_func(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
            duration=duration
        )

        return response
