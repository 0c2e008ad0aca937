"""
Job Portal Backend - Main FastAPI Application
"""

import logging
import sys
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobportal.api import create_api_router
from jobportal.core.config import get_settings
from jobportal.database.error_handling import DatabaseError
from jobportal.infrastructure.providers.service_provider import get_bootstrap_service, reset_services
from jobportal.infrastructure.providers.store_provider import get_document_store, reset_document_store
from jobportal.utils.security import reset_security_managers

# Configure structured logging
_log_level = getattr(logging, get_settings().LOG_LEVEL.upper(), logging.INFO)
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer() if sys.stdout.isatty() else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(_log_level),
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    settings = get_settings()
    logger.info(
        "Starting Job Portal API",
        version=app.version,
        environment=settings.ENVIRONMENT,
        document_store=settings.DOCUMENT_STORE,
    )

    try:
        store = await get_document_store()
        health = await store.check_health()
        logger.info("Document store ready", status=health.get("status"))

        if settings.SHOULD_INIT:
            bootstrap = await get_bootstrap_service()
            seeded = await bootstrap.seed()
            logger.info("Bootstrap finished", **seeded)
    except DatabaseError as e:
        logger.error("Failed to initialize document store", error=str(e))
        if settings.is_production():
            sys.exit(1)

    yield

    logger.info("Shutting down Job Portal API")
    await reset_services()
    await reset_document_store()
    reset_security_managers()
    logger.info("Service cleanup completed")


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error("Database error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"statusCode": 500, "message": "Database operation failed", "data": None},
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()

    app = FastAPI(
        title="Job Portal API",
        description="Recruitment backend with role-based access to jobs, companies and resumes",
        version=settings.APP_VERSION,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        openapi_url="/openapi.json" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DatabaseError, database_error_handler)

    app.include_router(create_api_router())

    @app.get("/health")
    async def health_check():
        """Health check including the document store"""
        store = await get_document_store()
        store_health = await store.check_health()
        return {
            "status": store_health.get("status", "unknown"),
            "version": app.version,
            "environment": settings.ENVIRONMENT,
            "services": {"document_store": store_health},
        }

    @app.get("/")
    async def root():
        """API root endpoint"""
        return {
            "message": "Job Portal API",
            "version": app.version,
            "docs_url": "/docs" if not settings.is_production() else None,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "jobportal.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_config=None,  # Use our structured logging
    )
