"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from bookstore.api.http.app_data import ApplicationDependencies
from bookstore.api.http.middleware.trailing_slash import StripTrailingSlashMiddleware
from bookstore.api.http.responses import status_text_response
from bookstore.api.http.routers.books import router as books_router
from bookstore.api.http.routers.health import router as health_router
from bookstore.core.exceptions import DataAccessError
from bookstore.core.services import DatabaseHealthService, DbSessionService
from bookstore.entities.book import BookRepository
from bookstore.runtime.config.settings import Settings
from bookstore.runtime.init_db import init_db


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            response = status_text_response(500)
            response.headers["X-Request-ID"] = request_id
            return response


# --- Exception handlers ---
async def handle_data_access_error(request: Request, exc: Exception):
    logger.bind(error_type=type(exc).__name__).error(
        "{} {} failed: {}", request.method, request.url.path, exc
    )
    return status_text_response(500)


async def handle_validation_error(request: Request, exc: Exception):
    errors = exc.errors() if isinstance(exc, RequestValidationError) else str(exc)
    logger.warning("{} {} rejected: {}", request.method, request.url.path, errors)
    return status_text_response(400)


def build_dependencies(settings: Settings) -> ApplicationDependencies:
    """Create the shared engine, repository and health checker."""
    database_service = DbSessionService(settings)
    if settings.db_init_schema:
        init_db(database_service)

    return ApplicationDependencies(
        settings=settings,
        books=BookRepository(database_service),
        health=DatabaseHealthService(database_service.engine),
        database_service=database_service,
    )


def create_app(deps: ApplicationDependencies) -> FastAPI:
    """Build the FastAPI application around already-constructed dependencies."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting up application in {} environment", deps.settings.environment
        )
        try:
            yield
        finally:
            logger.info("Shutting down application")
            if deps.database_service is not None:
                deps.database_service.dispose()

    production = deps.settings.environment == "production"
    app = FastAPI(
        title="Bookstore API",
        lifespan=lifespan,
        redirect_slashes=False,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
    )
    app.state.app_dependencies = deps

    app.add_middleware(SecurityHeadersMiddleware)
    app.middleware("http")(log_requests)
    app.add_middleware(StripTrailingSlashMiddleware)

    app.add_exception_handler(DataAccessError, handle_data_access_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    app.include_router(health_router)
    app.include_router(books_router)

    return app
