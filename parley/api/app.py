"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, observability setup and route registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from starlette.exceptions import HTTPException as StarletteHTTPException

from parley import __version__
from parley.api.dependencies import get_settings, reset_dependencies
from parley.api.middleware.context import RequestContextMiddleware
from parley.api.models.errors import ErrorDetail, ErrorResponse
from parley.api.routes import register_routes
from parley.config.settings import Settings
from parley.errors import CompletionError, ErrorCode, ParleyError
from parley.observability.logging import get_logger, setup_logging
from parley.observability.tracing import setup_tracing

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Failed to process request"

_STATUS_CODES = {
    400: ErrorCode.INVALID_REQUEST,
    401: ErrorCode.UNAUTHENTICATED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
}


def configure_observability(settings: Settings) -> None:
    """Configure logging and tracing from settings."""
    obs = settings.observability
    setup_logging(
        level=obs.logging.level,
        format=obs.logging.format,
        redact_pii=obs.logging.redact_pii,
    )
    if obs.tracing.enabled:
        setup_tracing(
            service_name=obs.tracing.service_name,
            otlp_endpoint=obs.tracing.otlp_endpoint,
            console_export=obs.tracing.console_export,
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Set up observability on startup and release clients on shutdown."""
    configure_observability(app.state.settings)
    logger.info("app_started", version=__version__)
    yield
    await reset_dependencies()
    logger.info("app_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build the app from (loaded if omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Parley API",
        description="Multi-turn conversation service backed by a text-generation provider",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)
    register_routes(app, settings)

    if settings.observability.tracing.enabled:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("opentelemetry_instrumentation_enabled")

    logger.info(
        "app_created",
        debug=settings.debug,
        cors_origins=settings.api.cors_origins,
    )

    return app


def _error_response(
    status_code: int,
    message: str,
    code: ErrorCode,
    details: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=message, code=code, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Every error leaves the service as {"error": <message>, "code": <CODE>}.
    Messages of 5xx errors are replaced by a generic one; the detail is
    logged instead.
    """

    @app.exception_handler(ParleyError)
    async def parley_error_handler(request: Request, exc: ParleyError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "turn_error",
                error_code=exc.error_code.value,
                error=str(exc),
                reason=exc.reason.value if isinstance(exc, CompletionError) else None,
                path=request.url.path,
            )
            message = INTERNAL_ERROR_MESSAGE
        else:
            logger.warning(
                "api_error",
                error_code=exc.error_code.value,
                message=exc.message,
                path=request.url.path,
            )
            message = exc.message

        return _error_response(exc.status_code, message, exc.error_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "validation_error",
            errors=[
                {"loc": [str(part) for part in e["loc"]], "msg": e["msg"]}
                for e in exc.errors()
            ],
            path=request.url.path,
        )

        details = []
        for error in exc.errors():
            loc = [str(part) for part in error["loc"] if part != "body"]
            details.append(ErrorDetail(field=".".join(loc) or None, message=error["msg"]))

        missing_message = any(d.field == "message" for d in details)
        return _error_response(
            400,
            "Message is required" if missing_message else "Request validation failed",
            ErrorCode.INVALID_REQUEST,
            details=details,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger.debug("http_error", status_code=exc.status_code, path=request.url.path)
        code = _STATUS_CODES.get(
            exc.status_code,
            ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.INVALID_REQUEST,
        )
        return _error_response(
            exc.status_code,
            str(exc.detail),
            code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(500, INTERNAL_ERROR_MESSAGE, ErrorCode.INTERNAL_ERROR)

    logger.debug("exception_handlers_registered")


# Create the app instance for uvicorn
app = create_app()
