"""FastAPI application entry point.

Main application setup with middleware, routing, and lifecycle management.
"""

import logging
import math
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docstudio import __version__
from docstudio.api import documents_router, format_router, templates_router
from docstudio.api.schemas import ErrorResponse
from docstudio.core.config import Settings, get_settings
from docstudio.core.exceptions import (
    DocStudioError,
    DocumentNotFoundError,
    FormatError,
    InvalidApiKeyError,
    InvalidValuesError,
    RateLimitError,
    StorageError,
    TemplateDepthError,
    TemplateNotFoundError,
    VaultApiError,
)
from docstudio.core.factory import ComponentFactory

logger = logging.getLogger(__name__)

# First match wins, so subclasses come before their bases
_ERROR_STATUS: list[tuple[type[DocStudioError], int, str]] = [
    (TemplateNotFoundError, status.HTTP_404_NOT_FOUND, "TEMPLATE_NOT_FOUND"),
    (DocumentNotFoundError, status.HTTP_404_NOT_FOUND, "DOCUMENT_NOT_FOUND"),
    (InvalidValuesError, status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_VALUES"),
    (TemplateDepthError, status.HTTP_422_UNPROCESSABLE_ENTITY, "TEMPLATE_TOO_DEEP"),
    (FormatError, status.HTTP_400_BAD_REQUEST, "FORMAT_ERROR"),
    (InvalidApiKeyError, status.HTTP_401_UNAUTHORIZED, "INVALID_API_KEY"),
    (RateLimitError, status.HTTP_429_TOO_MANY_REQUESTS, "RATE_LIMITED"),
    (VaultApiError, status.HTTP_502_BAD_GATEWAY, "VAULT_ERROR"),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_ERROR"),
]


def error_status(exc: DocStudioError) -> tuple[int, str]:
    """HTTP status and error code for an application error."""
    for exc_type, status_code, error_code in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status_code, error_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown events for proper resource management.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(
        f"Starting Document Studio API (storage={settings.storage_backend}, "
        f"remote_enabled={settings.remote_enabled})"
    )

    yield

    # Shutdown
    logger.info("Shutting down Document Studio API...")
    app.state.factory.clear_cache()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Document Studio",
        description="Legal document generation from templates with PDF/DOCX/HTML export",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Store settings and components in app state
    app.state.settings = settings
    app.state.factory = ComponentFactory(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(templates_router)
    app.include_router(format_router)
    app.include_router(documents_router)

    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "service": "docstudio-api",
            "version": __version__,
            "storage_backend": settings.storage_backend,
            "remote_enabled": settings.remote_enabled,
        }

    # Exception handlers
    @app.exception_handler(DocStudioError)
    async def docstudio_exception_handler(request: Request, exc: DocStudioError):
        """Map application errors to HTTP responses."""
        status_code, error_code = error_status(exc)
        extra = None
        if isinstance(exc, InvalidValuesError):
            extra = {"errors": exc.errors}
        elif isinstance(exc, VaultApiError):
            extra = {"upstream_status": exc.status}

        if status_code >= 500:
            logger.error(f"{error_code} on {request.url.path}: {exc}", exc_info=True)
        else:
            logger.warning(f"{error_code} on {request.url.path}: {exc}")

        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(detail=str(exc), error_code=error_code, extra=extra).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Validation error",
                "errors": jsonable_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                detail="Internal server error",
                error_code="INTERNAL_ERROR",
            ).model_dump(),
        )

    logger.info("FastAPI application created successfully")
    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the non-serializable ``ctx`` entries.

    Non-finite float inputs are reported as strings, since JSON has no
    literal for them.
    """
    errors = []
    for error in exc.errors():
        error = {k: v for k, v in error.items() if k != "ctx"}
        value = error.get("input")
        if isinstance(value, float) and not math.isfinite(value):
            error["input"] = str(value)
        errors.append(error)
    return errors


if __name__ == "__main__":
    import uvicorn

    from docstudio.core.logging_config import setup_logging

    setup_logging()
    settings = get_settings()
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        "docstudio.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
