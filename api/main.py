"""
api/main.py -- FastAPI application entry point for postgate.

Run with:      python main.py
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one access-log line per request

Lifespan builds every service once and attaches it to app.state:
  settings, token_service, user_store, post_store, directory, content.
Settings is constructed first, so a missing JWT_SECRET aborts startup before
the server accepts a single request.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.posts import router as posts_router
from api.routes.users import router as users_router
from auth.directory import UserDirectory
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import get_settings
from core.errors import AppError
from posts.service import ContentStore
from posts.store import PostStore

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("postgate.api")

# ---------------------------------------------------------------------------
# Background index creation
# ---------------------------------------------------------------------------


async def _ensure_email_index(user_store: UserStore) -> None:
    """Create the unique email index without blocking startup.

    Fire-and-forget: a failure is logged and the server keeps running. Until
    this completes, duplicate emails are caught only by the pre-check in
    UserDirectory.register().
    """
    try:
        await asyncio.to_thread(user_store.ensure_email_index)
        logger.info("Unique email index ready")
    except Exception:
        logger.exception("Failed to create unique email index on users")


# ---------------------------------------------------------------------------
# Lifespan -- startup / shutdown
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application-level resources across the full server lifetime.

    Startup order matters:
      1. Settings first -- raises if JWT_SECRET is missing.
      2. Stores second -- tables are created on construction.
      3. Services last -- they hold references to settings and stores.
      4. Index task -- references the user store.
    """
    # Startup
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    app.state.settings = settings
    logger.info("postgate API starting up")

    app.state.token_service = TokenService(settings)
    app.state.user_store = UserStore(settings.database_url)
    app.state.post_store = PostStore(settings.database_url)
    app.state.directory = UserDirectory(app.state.user_store, app.state.token_service)
    app.state.content = ContentStore(app.state.post_store)
    logger.info("Stores initialized (%s)", app.state.user_store.engine.url.render_as_string(hide_password=True))

    app.state.index_task = asyncio.create_task(_ensure_email_index(app.state.user_store))

    yield

    # Shutdown
    app.state.index_task.cancel()
    with suppress(asyncio.CancelledError):
        await app.state.index_task
    app.state.user_store.close()
    app.state.post_store.close()
    logger.info("postgate API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="postgate API",
    description="Blog posts with registration, bearer-token login and owner-only writes.",
    version=_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost", "http://localhost:3000", "http://127.0.0.1"],
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(users_router, tags=["Users"])
app.include_router(posts_router, tags=["Posts"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error(status_code: int, code: str, message: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with the status its class maps to."""
    return _error(exc.status_code, exc.code, exc.message)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Return 500 for persistence failures that no service translated.

    The driver message can include SQL and parameters, so it goes to the log
    only.
    """
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return _error(500, "storage_error", "Storage error.")


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when the request body fails validation."""
    return _error(422, "validation_error", "Request validation failed.", str(exc.errors()))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return a structured error for FastAPI/Starlette HTTP exceptions (404 route, 405 method)."""
    return _error(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return API liveness, version and database reachability. No auth required."""
    try:
        database = "ok" if request.app.state.user_store.ping() else "error"
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        database = "error"
    return HealthResponse(version=_VERSION, components={"app": "ok", "database": database})
