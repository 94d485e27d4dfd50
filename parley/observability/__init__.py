"""Observability: structured logging, distributed tracing, metrics.

Provides standardized observability primitives using structlog for logging,
OpenTelemetry for tracing, and Prometheus for metrics, plus the Reporter
interface through which the session core reports its operations.
"""

from parley.observability.reporting import (
    NullReporter,
    Operation,
    Reporter,
    TelemetryReporter,
)

__all__ = [
    "NullReporter",
    "Operation",
    "Reporter",
    "TelemetryReporter",
]
