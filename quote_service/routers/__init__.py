"""API routers."""

from . import health_router, quotes_router

__all__ = ["health_router", "quotes_router"]
