"""Prometheus metrics for Parley.

Provides standard metrics for request tracking, turn and completion
latencies, token usage, and failures.
"""

from prometheus_client import Counter, Histogram

# Request metrics
REQUEST_COUNT = Counter(
    "parley_request_count_total",
    "Total number of HTTP requests processed",
    labelnames=["endpoint", "status"],
)

# Operation metrics (fed by TelemetryReporter)
OPERATION_COUNT = Counter(
    "parley_operation_count_total",
    "Total number of reported operations",
    labelnames=["operation", "outcome"],
)

OPERATION_LATENCY = Histogram(
    "parley_operation_latency_seconds",
    "Reported operation latency in seconds",
    labelnames=["operation"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# Completion metrics
COMPLETION_LATENCY = Histogram(
    "parley_completion_latency_seconds",
    "Completion provider call latency in seconds",
    labelnames=["provider", "model"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

COMPLETION_FAILURES = Counter(
    "parley_completion_failures_total",
    "Completion calls that failed, by reason",
    labelnames=["provider", "reason"],
)

LLM_TOKENS = Counter(
    "parley_llm_tokens_total",
    "Total LLM tokens used",
    labelnames=["provider", "model", "direction"],
)

# Conversation metrics
CONVERSATIONS_CREATED = Counter(
    "parley_conversations_created_total",
    "Conversations started",
)

# Error metrics
ERRORS = Counter(
    "parley_errors_total",
    "Total number of errors",
    labelnames=["error_type"],
)
