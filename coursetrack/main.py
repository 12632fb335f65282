"""Coursetrack API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coursetrack.config import get_settings
from coursetrack.core.context import get_request_id
from coursetrack.core.database import init_async_cassandra, shutdown_async_cassandra
from coursetrack.core.errors import CoursetrackError
from coursetrack.core.logging import configure_structlog, get_logger
from coursetrack.core.middleware import RequestContextMiddleware
from coursetrack.core.redis import init_redis, shutdown_redis
from coursetrack.courses.service import CatalogService
from coursetrack.dashboard.router import roster_router
from coursetrack.dashboard.router import router as dashboard_router
from coursetrack.dashboard.service import DashboardService
from coursetrack.enrollment.router import router as enrollment_router
from coursetrack.enrollment.service import EnrollmentService
from coursetrack.events.publisher import EventPublisher
from coursetrack.health import router as health_router
from coursetrack.progress.router import router as progress_router
from coursetrack.progress.service import ProgressService
from coursetrack.submissions.router import (
    assignments_router,
    submissions_router,
    tutor_router,
)
from coursetrack.submissions.service import SubmissionService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))
logger = get_logger(__name__)


def init_services(app: FastAPI, session: Any, redis_client: Any = None) -> None:
    """Build every service on one Cassandra session and expose it on app.state."""
    settings = get_settings()
    keyspace = settings.cassandra_keyspace

    enrollment = EnrollmentService(session=session, keyspace=keyspace)
    catalog = CatalogService(session=session, keyspace=keyspace)
    progress = ProgressService(
        session=session,
        keyspace=keyspace,
        catalog=catalog,
        enrollment=enrollment,
    )
    submissions = SubmissionService(
        session=session,
        keyspace=keyspace,
        catalog=catalog,
        enrollment=enrollment,
        events=EventPublisher(redis_client, settings.submission_events_channel),
        closing_soon_days=settings.closing_soon_days,
        due_soon_days=settings.due_soon_days,
    )

    app.state.cassandra_session = session
    app.state.redis = redis_client
    app.state.enrollment_service = enrollment
    app.state.catalog_service = catalog
    app.state.progress_service = progress
    app.state.submission_service = submissions
    app.state.dashboard_service = DashboardService(
        enrollment=enrollment,
        catalog=catalog,
        progress=progress,
        submissions=submissions,
        closing_soon_days=settings.closing_soon_days,
        due_soon_days=settings.due_soon_days,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()

    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Initialize Redis (non-critical - events are only logged without it)
    redis_client = None
    try:
        redis_client = await init_redis()
        logger.info("redis_initialized")
    except Exception as e:
        logger.warning(
            "redis_init_skipped",
            error=str(e),
            message="Running without Redis - submission events disabled",
        )

    # Initialize Cassandra (async)
    try:
        session = await init_async_cassandra()
        init_services(app, session, redis_client)
        logger.info("services_initialized", redis_enabled=redis_client is not None)
    except Exception as e:
        logger.warning(
            "database_init_skipped",
            error=str(e),
            message="Running without database connection",
        )

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_redis()
    await shutdown_async_cassandra()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # debug=False keeps Starlette from rendering stack traces in responses
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Coursetrack - learner progress and assignment lifecycle API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    # Request context middleware (must be added first - outermost)
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    def _get_request_id_safe(request: Request) -> str | None:
        """Get request_id from request state or context."""
        if hasattr(request.state, "request_id"):
            return request.state.request_id
        return get_request_id()

    @app.exception_handler(CoursetrackError)
    async def domain_exception_handler(
        request: Request, exc: CoursetrackError
    ) -> ORJSONResponse:
        """Map domain errors to their HTTP status with a user-facing message."""
        log_method = (
            logger.error
            if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
            else logger.warning
        )
        log_method(
            "domain_error",
            error_type=type(exc).__name__,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.message,
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "code": exc.code,
                "message": exc.message,
                "status_code": exc.status_code,
                "request_id": _get_request_id_safe(request),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "code": "http_error",
                "message": str(exc.detail)
                if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
                else "Internal server error",
                "status_code": exc.status_code,
                "request_id": _get_request_id_safe(request),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle request validation errors (malformed ids, bad payloads)."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "code": "validation_error",
                "message": "Validation error",
                "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
                "request_id": _get_request_id_safe(request),
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in err.get("loc", [])),
                        "message": err.get("msg", "Invalid value"),
                    }
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler for unhandled exceptions.

        Full details are logged; the response carries a generic message.
        """
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "code": "internal_error",
                "message": "An unexpected error occurred. Please try again later.",
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
                "request_id": _get_request_id_safe(request),
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(enrollment_router)
    app.include_router(progress_router)
    app.include_router(assignments_router)
    app.include_router(submissions_router)
    app.include_router(tutor_router)
    app.include_router(roster_router)
    app.include_router(dashboard_router)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "Coursetrack API",
            "version": settings.app_version,
            "docs": f"{request.url}docs",
        }

    return app


app = create_app()
