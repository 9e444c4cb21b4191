"""OpenTelemetry tracing support for the Cloudflare Operator."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

_TRACER_NAME = "cloudflare-operator"


def initialize_tracing(service_name: str = "cloudflare-operator") -> bool:
    """Initialize OpenTelemetry tracing with an OTLP exporter.

    Environment Variables:
        OTEL_TRACES_ENABLED: Enable tracing (default: false)
        OTEL_EXPORTER_OTLP_ENDPOINT: OTLP endpoint URL (default: http://localhost:4317)
        OTEL_SERVICE_NAME: Service name (default: cloudflare-operator)

    Returns:
        True if a tracer provider was installed
    """
    if os.getenv("OTEL_TRACES_ENABLED", "false").lower() != "true":
        return False

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    try:
        resource = Resource.create({
            "service.name": os.getenv("OTEL_SERVICE_NAME", service_name),
            "service.version": os.getenv("OTEL_SERVICE_VERSION", "unknown"),
        })
        provider = TracerProvider(resource=resource)
        endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        trace.set_tracer_provider(provider)
    except Exception as e:
        # Tracing initialization failures should not break the operator
        logger.warning(f"Failed to initialize tracing: {e}")
        return False
    return True


def get_tracer() -> Tracer:
    """Get the operator tracer (a no-op tracer until a provider is installed)."""
    return trace.get_tracer(_TRACER_NAME)


@contextmanager
def trace_span(
    name: str,
    kind: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span]:
    """Context manager for creating a trace span.

    Args:
        name: Name of the span
        kind: Resource kind (e.g., "LoadBalancer")
        attributes: Additional span attributes

    Yields:
        The active span
    """
    attrs = dict(attributes or {})
    if kind:
        attrs["resource.kind"] = kind

    with get_tracer().start_as_current_span(name, attributes=attrs, record_exception=False) as span:
        try:
            yield span
        except Exception as e:
            if span.is_recording():
                span.record_exception(e)
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


def add_span_attribute(key: str, value: Any) -> None:
    """Add an attribute to the current span."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute(key, value)
