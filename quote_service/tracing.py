"""
OpenTelemetry instrumentation configuration.

Provides automatic tracing for HTTP requests.
"""

import os
from typing import Optional

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


def configure_opentelemetry(
    service_name: str,
    service_version: str,
    otlp_endpoint: str,
    enable_tracing: bool = True,
) -> bool:
    """
    Configure the global tracer provider.

    Args:
        service_name: Name of the service
        service_version: Version of the service
        otlp_endpoint: OTLP gRPC collector endpoint
        enable_tracing: Whether to enable tracing at all

    Returns:
        True if a tracer provider was installed
    """
    if not enable_tracing:
        return False

    resource = Resource.create(
        {
            SERVICE_NAME: service_name,
            SERVICE_VERSION: service_version,
            "deployment.environment": os.getenv("ENVIRONMENT", "production"),
        }
    )

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    )
    trace.set_tracer_provider(tracer_provider)
    return True


def instrument_fastapi(app: FastAPI, excluded_urls: Optional[str] = None) -> None:
    """
    Instrument FastAPI application with OpenTelemetry.

    Args:
        app: FastAPI application instance
        excluded_urls: Comma-separated list of URL patterns to exclude from tracing
    """
    if excluded_urls is None:
        excluded_urls = "/health,/ready,/metrics"

    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls=excluded_urls,
        tracer_provider=trace.get_tracer_provider(),
    )
