"""
FastAPI application factory.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cleanops.api.middleware.error_handler import add_error_handlers
from cleanops.api.middleware.logging import LoggingMiddleware
from cleanops.api.routes import health, invoices, jobs, overrides, photos, properties
from cleanops.config.logging import get_logger
from cleanops.config.settings import settings
from cleanops.infrastructure.database.immutability import (
    register_immutability_listeners,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup", environment=settings.ENVIRONMENT)
    yield
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    register_immutability_listeners()

    docs_enabled = settings.DEBUG or settings.ENABLE_SWAGGER
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Cleaning job lifecycle, manager review and cleaner invoicing",
        openapi_url=f"{settings.API_PREFIX}/openapi.json" if docs_enabled else None,
        docs_url=f"{settings.API_PREFIX}/docs" if docs_enabled else None,
        redoc_url=f"{settings.API_PREFIX}/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_error_handlers(app)
    LoggingMiddleware(app)

    app.include_router(health.router, prefix=settings.API_PREFIX, tags=["health"])
    app.include_router(jobs.router, prefix=settings.API_PREFIX, tags=["jobs"])
    app.include_router(photos.router, prefix=settings.API_PREFIX, tags=["photos"])
    app.include_router(overrides.router, prefix=settings.API_PREFIX, tags=["overrides"])
    app.include_router(invoices.router, prefix=settings.API_PREFIX, tags=["invoices"])
    app.include_router(
        properties.router, prefix=settings.API_PREFIX, tags=["properties"]
    )

    return app
