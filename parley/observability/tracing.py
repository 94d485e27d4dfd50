"""OpenTelemetry distributed tracing setup.

Provides trace context propagation, span creation, and OTLP export.
Supports W3C Trace Context for cross-service correlation.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from parley import __version__

_tracer: Tracer | None = None

_propagator = TraceContextTextMapPropagator()


def setup_tracing(
    service_name: str = "parley",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> Tracer:
    """Initialize OpenTelemetry tracing.

    Args:
        service_name: Name to identify this service in traces
        otlp_endpoint: OTLP gRPC endpoint (e.g., "localhost:4317")
                       Falls back to OTEL_EXPORTER_OTLP_ENDPOINT env var
        console_export: Also export spans to console (for debugging)

    Returns:
        Configured Tracer instance
    """
    global _tracer

    resource = Resource.create({
        SERVICE_NAME: service_name,
        SERVICE_VERSION: __version__,
        "deployment.environment": os.environ.get("PARLEY_ENV", "development"),
    })
    provider = TracerProvider(resource=resource)

    endpoint = otlp_endpoint or os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
        )

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)

    return _tracer


def get_tracer() -> Tracer:
    """Get the configured tracer, or the global (possibly no-op) one."""
    if _tracer is None:
        return trace.get_tracer("parley")
    return _tracer


def extract_context(headers: dict[str, str]) -> Context:
    """Extract W3C trace context (traceparent/tracestate) from HTTP headers."""
    return _propagator.extract(carrier=headers)


def inject_context(headers: dict[str, str], context: Context | None = None) -> None:
    """Inject W3C trace context headers into an outgoing header dict."""
    _propagator.inject(carrier=headers, context=context)


def get_current_trace_id() -> str | None:
    """Get the current trace ID as a hex string, or None outside a trace."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        return format(span_context.trace_id, "032x")
    return None


def get_current_span_id() -> str | None:
    """Get the current span ID as a hex string, or None outside a span."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        return format(span_context.span_id, "016x")
    return None


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
    context: Context | None = None,
    tracer: Tracer | None = None,
) -> Generator[Span, None, None]:
    """Create a new span as a context manager.

    Exceptions are recorded by the caller (see record_exception); the span
    itself does not set an error status on exit.

    Args:
        name: Span name
        kind: Span kind (INTERNAL, SERVER, CLIENT, etc.)
        attributes: Initial span attributes
        context: Parent context (current if not specified)
        tracer: Tracer to use (configured tracer if not specified)
    """
    with (tracer or get_tracer()).start_as_current_span(
        name,
        kind=kind,
        attributes=attributes or {},
        context=context,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        yield span


def record_exception(span: Span, exception: BaseException, escaped: bool = True) -> None:
    """Record an exception on a span and mark it failed."""
    span.record_exception(exception, escaped=escaped)
    span.set_status(Status(StatusCode.ERROR, str(exception)))


def set_span_attributes(span: Span, **attributes: Any) -> None:
    """Set multiple attributes on a span, skipping None values."""
    for key, value in attributes.items():
        if value is not None:
            span.set_attribute(key, value)
