"""Request context middleware for observability."""

import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bind_contextvars, clear_contextvars

from parley.api.models.context import RequestContext
from parley.observability.logging import get_logger
from parley.observability.metrics import REQUEST_COUNT

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that binds request context for observability.

    Creates a RequestContext at the start of each request, binds its ids to
    structlog contextvars (so every log event emitted while handling the
    request carries them), counts the request and echoes the ids back as
    X-Request-ID / X-Trace-ID response headers.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        clear_contextvars()

        span_context = trace.get_current_span().get_span_context()
        trace_id = format(span_context.trace_id, "032x") if span_context.is_valid else ""

        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        context = RequestContext(
            trace_id=trace_id or request_id,
            request_id=request_id,
        )
        bind_contextvars(trace_id=context.trace_id, request_id=context.request_id)

        logger.debug(
            "request_started",
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)

        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        REQUEST_COUNT.labels(endpoint=endpoint, status=str(response.status_code)).inc()

        logger.debug(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )

        response.headers["X-Request-ID"] = context.request_id
        if context.trace_id:
            response.headers["X-Trace-ID"] = context.trace_id

        return response
