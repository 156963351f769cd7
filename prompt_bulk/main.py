"""FastAPI application entry point.

Main application setup with middleware, routing, error handling and
lifecycle management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from prompt_bulk import __version__
from prompt_bulk.api import generation_router, presets_router, templates_router
from prompt_bulk.api.schemas import ErrorResponse
from prompt_bulk.core.config import Settings, get_settings
from prompt_bulk.core.factory import ComponentFactory
from prompt_bulk.core.logging_config import setup_logging
from prompt_bulk.db.session import close_db, init_db
from prompt_bulk.interfaces.generation import NotFoundError, ValidationError
from prompt_bulk.interfaces.store import StoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Creates the database schema on startup and disposes the engine on
    shutdown. The in-memory backend needs neither.
    """
    settings: Settings = app.state.settings
    factory: ComponentFactory = app.state.factory

    logger.info("Starting Prompt Bulk API...")

    if factory.uses_database:
        try:
            logger.info("Initializing database...")
            await init_db(settings)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}", exc_info=True)
            raise

    yield

    logger.info("Shutting down Prompt Bulk API...")

    if factory.uses_database:
        try:
            await close_db()
            logger.info("Database connections closed")
        except Exception as e:
            logger.error(f"Error closing database: {e}", exc_info=True)


def _error(status_code: int, detail: str, error_code: str, extra: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=detail, error_code=error_code, extra=extra).model_dump(),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    settings.configure_logging()
    setup_logging(settings)

    app = FastAPI(
        title="Prompt Bulk",
        description="Bulk prompt generation from templates and variable presets",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.factory = ComponentFactory(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(templates_router)
    app.include_router(presets_router)
    app.include_router(generation_router)
    logger.info("Registered templates, variable-presets and generation routers")

    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "service": "prompt-bulk-api",
            "version": __version__,
            "store": settings.store_backend,
        }

    @app.exception_handler(ValidationError)
    async def generation_validation_handler(request: Request, exc: ValidationError):
        """Handle incomplete or malformed generation requests."""
        logger.warning(f"Generation rejected: {exc}")
        return _error(
            status.HTTP_400_BAD_REQUEST,
            str(exc),
            "VALIDATION_ERROR",
            {"missing": exc.missing} if exc.missing else None,
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        """Handle references to templates or presets that don't exist."""
        logger.warning(f"Generation lookup failed: {exc}")
        return _error(
            status.HTTP_404_NOT_FOUND,
            str(exc),
            "NOT_FOUND",
            {"ids": exc.ids} if exc.ids else None,
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        """Handle record store failures."""
        logger.error(f"Store error: {exc}", exc_info=exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc), "STORE_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={
                "detail": "Validation error",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")

    logger.info("FastAPI application created successfully")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        "prompt_bulk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
