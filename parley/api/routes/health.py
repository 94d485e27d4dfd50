"""Health check and metrics endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from parley import __version__
from parley.api.models.health import ComponentHealth, HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report process liveness.

    No state is inspected: a process able to answer is healthy.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        components=[ComponentHealth(name="session_manager", status="healthy")],
        timestamp=datetime.now(UTC),
    )


async def get_metrics() -> Response:
    """Get Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
