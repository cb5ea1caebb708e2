"""Job Board API — users, job postings and applications.

FastAPI application with lifespan management, CORS, request logging,
rate limiting and global error handling.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobboard.api.router import api_router
from jobboard.config import Settings, get_settings
from jobboard.models.responses import ErrorResponse
from jobboard.services.applications import ApplicationService
from jobboard.services.auth import TokenService
from jobboard.services.errors import JobBoardError
from jobboard.services.jobs import JobService
from jobboard.services.rate_limiter import TokenBucketRateLimiter
from jobboard.services.repository import JobBoardRepository
from jobboard.services.users import UserService
from jobboard.validators import ValidationFailed


def configure_logging(settings: Settings) -> None:
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


logger = structlog.get_logger()


def _error(status: int, message: str, error: Optional[str] = None, errors=None) -> JSONResponse:
    body = ErrorResponse(status=status, message=message, error=error, errors=errors)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    repository = JobBoardRepository(settings.DATABASE_PATH)
    rate_limiter = TokenBucketRateLimiter(
        requests_per_minute=settings.RATE_LIMIT_REQUESTS_PER_MINUTE,
        burst=settings.RATE_LIMIT_BURST,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown lifecycle."""
        # ── Startup ──
        logger.info("app_starting", debug=settings.DEBUG)

        await run_in_threadpool(repository.connect)

        tokens = TokenService(settings)
        jobs = JobService(repository)
        app.state.repository = repository
        app.state.tokens = tokens
        app.state.user_service = UserService(repository, tokens, settings)
        app.state.job_service = jobs
        app.state.application_service = ApplicationService(repository, jobs)

        logger.info("app_started")

        yield

        # ── Shutdown ──
        logger.info("app_shutting_down")
        await run_in_threadpool(repository.close)
        logger.info("app_stopped")

    app = FastAPI(
        title="Job Board API",
        description=(
            "Job board backend: user accounts, job postings, applications and search, "
            "with role-aware request validation."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ── Middleware ──

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"
        if not rate_limiter.allow_request(client_ip):
            logger.warning("rate_limited", client_ip=client_ip, path=request.url.path)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests, please try again later",
                    "code": "RATE_LIMIT_EXCEEDED",
                },
                headers={"Retry-After": str(int(rate_limiter.reset_time(client_ip)) + 1)},
            )
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start = time.perf_counter()

        response = await call_next(request)

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            query=request.url.query,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            client_ip=request.client.host if request.client else None,
        )
        response.headers["X-Request-ID"] = request_id
        return response

    # ── Exception Handlers ──

    @app.exception_handler(ValidationFailed)
    async def validation_failed_handler(request: Request, exc: ValidationFailed):
        return _error(400, "Validation failed", errors=list(exc.errors))

    @app.exception_handler(JobBoardError)
    async def job_board_error_handler(request: Request, exc: JobBoardError):
        return _error(exc.status_code, exc.message, error=exc.detail or None)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all error handler for unhandled exceptions."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error(500, "An unexpected error occurred. Please try again.", error="internal_server_error")

    # ── Routes ──

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """Root endpoint — API info."""
        return {
            "name": "Job Board API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


app = create_app()
