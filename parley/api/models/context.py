"""Request context models for middleware and observability."""

from pydantic import BaseModel, ConfigDict


class CallerIdentity(BaseModel):
    """Caller identity extracted from a verified bearer token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    """Subject of the token ('sub' or 'userId' claim)."""

    username: str | None = None
    """Display name from the 'username' claim."""


class RequestContext(BaseModel):
    """Request context for observability and logging.

    Bound at the start of each request and used to correlate logs,
    traces, and metrics across the request lifecycle.
    """

    trace_id: str
    """OpenTelemetry trace ID (request ID when no trace is active)."""

    request_id: str
    """Unique identifier for this request."""
