"""
Prometheus metrics for Quote Service.

Tracks HTTP traffic, quote operations, page tokens and database calls.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "quote_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "quote_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0)
)

# Quote metrics
quote_operations_total = Counter(
    "quote_operations_total",
    "Total quote operations",
    ["operation", "status"]
)

quote_page_tokens_total = Counter(
    "quote_page_tokens_total",
    "Page token lifecycle events",
    ["event"]
)

# Database metrics
quote_db_operations_total = Counter(
    "quote_db_operations_total",
    "Total database operations",
    ["operation", "status"]
)

quote_db_operation_duration_seconds = Histogram(
    "quote_db_operation_duration_seconds",
    "Database operation duration in seconds",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)
)


def track_request_metrics(method: str, endpoint: str, status_code: int, duration: float):
    """Track HTTP request metrics."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def track_quote_operation(operation: str, status: str):
    """Track a quote operation outcome (success, not_found, failure, ...)."""
    quote_operations_total.labels(operation=operation, status=status).inc()


def track_page_token(event: str):
    """Track page token events (issued, consumed, rejected)."""
    quote_page_tokens_total.labels(event=event).inc()


def track_db_operation(operation: str, success: bool, duration: float):
    """Track database operation metrics."""
    status = "success" if success else "failure"
    quote_db_operations_total.labels(operation=operation, status=status).inc()
    quote_db_operation_duration_seconds.labels(operation=operation).observe(duration)


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
