"""Reporting interface between the session core and the observability sink.

Components receive a Reporter at construction time and wrap each unit of
work in ``reporter.operation(...)``. The default TelemetryReporter turns an
operation into an OpenTelemetry span, a structlog event and Prometheus
samples; NullReporter discards everything, which keeps the core testable
without a live backend.

Example:
    with reporter.operation("turn", conversation_id=cid) as op:
        op.annotate(message_count=len(history))
        ...
"""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Generator, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Any

from opentelemetry.trace import Span, Status, StatusCode, Tracer

from parley.observability.logging import get_logger
from parley.observability.metrics import ERRORS, OPERATION_COUNT, OPERATION_LATENCY
from parley.observability.tracing import create_span, record_exception

logger = get_logger(__name__)

ATTRIBUTE_PREFIX = "parley."


class Operation(ABC):
    """Handle to an in-flight reported operation."""

    @abstractmethod
    def annotate(self, **attributes: Any) -> None:
        """Attach attributes to the operation."""

    @abstractmethod
    def fail(self, error: BaseException) -> None:
        """Mark the operation failed with the given error."""

    @property
    @abstractmethod
    def failed(self) -> bool:
        """Whether fail() was called."""


class Reporter(ABC):
    """Narrow reporting interface: start, annotate and end operations."""

    @abstractmethod
    def operation(self, name: str, **attributes: Any) -> AbstractContextManager[Operation]:
        """Start an operation that ends when the context exits.

        An exception escaping the context (including task cancellation)
        marks the operation failed and is re-raised unchanged.
        """


class _NullOperation(Operation):
    def __init__(self) -> None:
        self._failed = False

    def annotate(self, **attributes: Any) -> None:
        pass

    def fail(self, error: BaseException) -> None:  # noqa: ARG002
        self._failed = True

    @property
    def failed(self) -> bool:
        return self._failed


class NullReporter(Reporter):
    """Reporter that records nothing."""

    @contextmanager
    def operation(self, name: str, **attributes: Any) -> Iterator[Operation]:  # noqa: ARG002
        yield _NullOperation()


class _TelemetryOperation(Operation):
    def __init__(self, span: Span, attributes: dict[str, Any]) -> None:
        self._span = span
        self.attributes = attributes
        self.error: BaseException | None = None

    def annotate(self, **attributes: Any) -> None:
        for key, value in attributes.items():
            if value is None:
                continue
            self.attributes[key] = value
            self._span.set_attribute(f"{ATTRIBUTE_PREFIX}{key}", value)

    def fail(self, error: BaseException) -> None:
        if self.error is error:
            return
        self.error = error
        error_type = type(error).__name__
        record_exception(self._span, error)
        self._span.set_attribute("error.type", error_type)
        self._span.set_attribute("error.message", str(error))
        ERRORS.labels(error_type=error_type).inc()

    @property
    def failed(self) -> bool:
        return self.error is not None


class TelemetryReporter(Reporter):
    """Reporter backed by OpenTelemetry, structlog and Prometheus.

    Each operation becomes a span named ``parley.<name>``; operations
    started inside another operation produce child spans. Attributes are
    recorded on the span under the ``parley.`` prefix and on the log event
    as plain keys.
    """

    def __init__(self, tracer: Tracer | None = None) -> None:
        self._tracer = tracer

    @contextmanager
    def operation(
        self, name: str, **attributes: Any
    ) -> Generator[Operation, None, None]:
        start = time.perf_counter()
        initial = {
            f"{ATTRIBUTE_PREFIX}{key}": value
            for key, value in attributes.items()
            if value is not None
        }

        with create_span(
            f"{ATTRIBUTE_PREFIX}{name}", attributes=initial, tracer=self._tracer
        ) as span:
            op = _TelemetryOperation(
                span, {k: v for k, v in attributes.items() if v is not None}
            )
            try:
                yield op
            except BaseException as exc:
                op.fail(exc)
                raise
            finally:
                elapsed = time.perf_counter() - start
                if isinstance(op.error, asyncio.CancelledError):
                    outcome = "cancelled"
                else:
                    outcome = "error" if op.failed else "ok"
                OPERATION_COUNT.labels(operation=name, outcome=outcome).inc()
                OPERATION_LATENCY.labels(operation=name).observe(elapsed)

                if op.error is not None:
                    logger.warning(
                        f"{name}_cancelled" if outcome == "cancelled" else f"{name}_failed",
                        error_type=type(op.error).__name__,
                        error=str(op.error),
                        duration_ms=round(elapsed * 1000, 2),
                        **op.attributes,
                    )
                else:
                    span.set_status(Status(StatusCode.OK))
                    logger.debug(
                        f"{name}_completed",
                        duration_ms=round(elapsed * 1000, 2),
                        **op.attributes,
                    )
