"""Main FastAPI application."""
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from cedoi.api.router import api_router
from cedoi.core import config
from cedoi.core.config import Settings
from cedoi.core.exceptions import AttendanceError, StorageError
from cedoi.core.logging_config import get_logger, setup_logging
from cedoi.core.rate_limit import limiter
from cedoi.middleware import LoggingMiddleware
from cedoi.seed import seed_default_users
from cedoi.services.auth import OtpManager
from cedoi.storage import AttendanceStore, build_store

logger = get_logger(__name__)


async def attendance_error_handler(request: Request, exc: AttendanceError) -> JSONResponse:
    """Render domain errors with the same body shape as HTTPException."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log("request_rejected", error_type=type(exc).__name__, status_code=exc.status_code, detail=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(store: Optional[AttendanceStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around one store instance.

    Args:
        store: Storage backend; built from STORAGE_BACKEND when omitted
        settings: Defaults to the environment-loaded settings
    """
    settings = settings or config.settings

    setup_logging(level=settings.LOG_LEVEL, json_logs=settings.ENVIRONMENT == "production")

    if settings.ENVIRONMENT == "production":
        settings.validate_production_config()

    logger.info(
        "application_starting",
        app_title=settings.APP_TITLE,
        app_version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    app = FastAPI(
        title=settings.APP_TITLE,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
    )

    app.state.settings = settings
    app.state.store = store if store is not None else build_store(settings)
    app.state.otp_manager = OtpManager(settings)

    if settings.SEED_DEFAULT_USERS:
        seed_default_users(app.state.store)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(AttendanceError, attendance_error_handler)

    app.add_middleware(LoggingMiddleware)

    @app.middleware("http")
    async def add_api_version_header(request: Request, call_next):
        """Add X-API-Version header to all responses for version tracking."""
        response = await call_next(request)
        response.headers["X-API-Version"] = settings.APP_VERSION
        return response

    # Session cookies need credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-API-Version", "Content-Disposition"],
    )

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        """
        Health check.

        Returns 503 when the storage backend is unreachable.
        """
        store_ = app.state.store
        health_status = {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "storage": {"backend": store_.backend_name, "status": "connected"},
        }
        try:
            store_.ping()
        except StorageError as e:
            health_status["status"] = "unhealthy"
            health_status["storage"]["status"] = f"error: {e.message}"
            logger.error("health_check_failed", error=e.message)
            raise HTTPException(status_code=503, detail=health_status)

        return health_status

    return app
