"""
FastAPI application entry point for the hybrid dashboard backend.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.health import router as health_router
from .api.settings import router as settings_router
from .core.config import get_settings
from .core.exceptions import AppError
from .core.logging_config import configure_logging
from .database.kv_store import create_kv_store
from .services.settings_hybrid import HybridSettingsService

logger = structlog.get_logger()


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Map AppError subclasses to their HTTP status codes.

    Keeps NetworkError, ConfigurationError, ValidationError etc. from
    surfacing as generic 500 errors.
    """
    logger.error(
        "Application error occurred",
        path=request.url.path,
        method=request.method,
        **exc.to_dict(),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_type": exc.error_type},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Wire the key/value store and hybrid settings service for the app."""
    settings = get_settings()

    logger.info("Starting hybrid dashboard backend", environment=settings.environment)

    kv_store = create_kv_store(settings)
    service = HybridSettingsService.from_settings(settings, kv_store)

    app.state.kv_store = kv_store
    app.state.settings_service = service

    try:
        yield
    finally:
        await service.close()
        logger.info("Hybrid dashboard backend stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)

    app = FastAPI(
        title="Hybrid Dashboard API",
        description="SmartMenu settings and quarterly analytics",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]

    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(settings_router, prefix="/api")

    return app


# Create app instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "hybrid_dashboard.main:app",
        host="0.0.0.0",  # nosec B104 - Required for Docker container
        port=8000,
        reload=settings.is_development,
        log_config=None,  # Use structlog configuration
    )
