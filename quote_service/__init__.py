"""Quote Service - PostgreSQL-backed quote storage over HTTP."""

__version__ = "1.0.0"
