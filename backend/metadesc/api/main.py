"""
FastAPI application factory and main entry point.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from metadesc.api.middleware import WideEventMiddleware
from metadesc.api.routes import ai, auth, descriptions, health
from metadesc.api.routes import settings as settings_routes
from metadesc.core.config import settings
from metadesc.core.exceptions import (
    ApiKeyMissingError,
    AuthenticationError,
    InvalidTokenError,
    MetaDescriptionError,
    PermissionDeniedError,
    ProviderAPIError,
    ProviderNotFoundError,
    ValidationError,
)
from metadesc.core.logging import configure_logging, enrich_event
from metadesc.db import DatabaseError, close_db, init_db

# Configure structured logging with wide events support
configure_logging(
    json_logs=not settings.debug,  # JSON in production, console in dev
    log_level="DEBUG" if settings.debug else "INFO",
)

logger = structlog.get_logger()

# Error kinds with a fixed status code. Checked in order with isinstance.
ERROR_STATUS: tuple[tuple[type[MetaDescriptionError], int], ...] = (
    (ApiKeyMissingError, 400),
    (ValidationError, 400),
    (ProviderNotFoundError, 400),
    (AuthenticationError, 401),
    (InvalidTokenError, 403),
    (PermissionDeniedError, 403),
)


def error_status(exc: MetaDescriptionError) -> int:
    """Map an application error to the HTTP status returned to the caller.

    A vendor 401/403 means the stored API key is bad, not the caller's
    session, so it becomes 400. Other vendor error statuses are passed on.
    Errors without a status (decode, parse, transport) are 500.
    """
    if isinstance(exc, ProviderAPIError):
        if exc.status in (401, 403):
            return 400
        return exc.status if exc.status >= 400 else 500

    for error_cls, status_code in ERROR_STATUS:
        if isinstance(exc, error_cls):
            return status_code
    return 500


def error_response(status_code: int, message: str) -> JSONResponse:
    """Failure envelope shared by every endpoint."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "data": {"message": message}},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("Starting AI Meta Description API", version=settings.app_version)
    await init_db()
    logger.info("Database initialized")

    if not settings.is_auth_enabled:
        logger.warning("Authentication disabled, requests run as mock administrator")

    yield

    logger.info("Shutting down AI Meta Description API")
    await close_db()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="AI-generated SEO meta descriptions via Gemini, Mistral, OpenAI, Anthropic and Cohere",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Wide Events middleware - canonical log line per request
    app.add_middleware(WideEventMiddleware)

    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(ai.router, prefix="/api/v1/ai", tags=["AI"])
    app.include_router(settings_routes.router, prefix="/api/v1/settings", tags=["Settings"])
    app.include_router(descriptions.router, prefix="/api/v1/posts", tags=["Descriptions"])

    # Exception Handlers
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies get the same envelope as any validation failure."""
        logger.warning("Validation error", url=str(request.url), errors=exc.errors())
        enrich_event(error={"type": "RequestValidationError"})
        return error_response(400, "Invalid request.")

    @app.exception_handler(DatabaseError)
    async def database_exception_handler(request: Request, exc: DatabaseError):
        """Handle database errors"""
        logger.error("Database error", url=str(request.url), error=exc.message, exc_info=True)
        return error_response(503, "Database operation failed.")

    @app.exception_handler(MetaDescriptionError)
    async def app_exception_handler(request: Request, exc: MetaDescriptionError):
        """Handle application errors, including every provider failure."""
        status_code = error_status(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log("App error", url=str(request.url), code=exc.code, message=exc.message, status=status_code)
        enrich_event(error={"type": type(exc).__name__, "code": exc.code, "details": exc.details})
        if isinstance(exc, ProviderAPIError):
            enrich_event(**{"ai.vendor_status": exc.status})
        return error_response(status_code, exc.message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions"""
        logger.error("Unexpected error", url=str(request.url), error=str(exc), exc_info=True)

        # Don't expose internal details in production
        message = str(exc) if settings.debug else "An unexpected error occurred."
        return error_response(500, message)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "metadesc.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
