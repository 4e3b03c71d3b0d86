"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rignum.api.middleware.timeout import TimeoutMiddleware
from rignum.api.routes import feed, health, sources, tags
from rignum.api.routes.health import API_VERSION
from rignum.config.settings import get_settings
from rignum.storage.database import Database

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the connection pool for the lifetime of the app.

    A database handed to create_app() is used as-is and left open;
    otherwise a pool is created here and closed on shutdown.
    """
    logger.info("Feed API starting up")

    settings = get_settings()
    if settings.tracing_enabled:
        from rignum.observability.tracing import setup_tracing

        setup_tracing(
            service_name=settings.otel_service_name,
            otlp_endpoint=settings.otel_exporter_otlp_endpoint,
        )

    owns_database = app.state.database is None
    if owns_database:
        database = Database()
        await database.connect()
        app.state.database = database

    yield

    logger.info("Feed API shutting down")
    if owns_database:
        await app.state.database.close()
        app.state.database = None


def create_app(database: Database | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Pre-built pool to serve from (tests, embedding). When
            omitted the lifespan creates and owns one.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "feed", "description": "Policy-gated item feed"},
        {"name": "sources", "description": "Enabled sources for filtering"},
        {"name": "tags", "description": "Allowed filter vocabularies"},
    ]

    app = FastAPI(
        title="Rignum Feed API",
        description="""
Read-only feed of market-related metadata captured from external platforms.

Items are only served while inside their 24-hour retention window, once
published, at visibility level 0 or 1, and when not hidden by moderation.
        """,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )
    app.state.database = database

    # CORS (origins from CORS_ORIGINS env var, comma-separated)
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request timeout middleware (added before logging middleware
    # so timeout wraps the entire request lifecycle)
    if settings.request_timeout_seconds > 0:
        app.add_middleware(
            TimeoutMiddleware,
            timeout_seconds=settings.request_timeout_seconds,
        )

    # Request logging, correlation ID, and tracing middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        from rignum.observability.tracing import get_tracer, is_tracing_enabled

        # Correlation ID: use incoming header or generate a new one
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()

        try:
            if is_tracing_enabled():
                tracer = get_tracer("rignum.api")
                with tracer.start_as_current_span(
                    f"{request.method} {request.url.path}",
                    attributes={
                        "http.method": request.method,
                        "http.url": str(request.url),
                        "http.route": request.url.path,
                        "http.request_id": request_id,
                    },
                ) as span:
                    response = await call_next(request)
                    duration = time.perf_counter() - start_time
                    span.set_attribute("http.status_code", response.status_code)
                    span.set_attribute("http.duration_ms", round(duration * 1000, 2))
            else:
                response = await call_next(request)
                duration = time.perf_counter() - start_time

            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    # Rate limiting (opt-in via RATE_LIMIT_ENABLED=true)
    if settings.rate_limit_enabled:
        from slowapi import _rate_limit_exceeded_handler
        from slowapi.errors import RateLimitExceeded

        from rignum.api.rate_limit import limiter

        app.state.limiter = limiter
        app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(feed.router, tags=["feed"])
    app.include_router(sources.router, tags=["sources"])
    app.include_router(tags.router, tags=["tags"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "Rignum Feed API",
            "version": API_VERSION,
            "docs": "/docs",
        }

    return app
