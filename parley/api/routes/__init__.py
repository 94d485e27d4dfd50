"""API route registration."""

from fastapi import FastAPI

from parley.config.settings import Settings
from parley.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Settings deciding which optional routes are exposed
    """
    from parley.api.routes.chat import router as chat_router
    from parley.api.routes.conversations import router as conversations_router
    from parley.api.routes.health import get_metrics
    from parley.api.routes.health import router as health_router

    app.include_router(chat_router, tags=["Chat"])
    app.include_router(conversations_router, tags=["Conversations"])
    app.include_router(health_router, tags=["Health"])

    if settings.observability.metrics.enabled:
        app.add_api_route(
            settings.observability.metrics.path,
            get_metrics,
            methods=["GET"],
            tags=["Health"],
        )

    logger.info(
        "routes_registered",
        metrics_enabled=settings.observability.metrics.enabled,
    )
