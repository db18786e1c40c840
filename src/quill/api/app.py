"""FastAPI application factory.

The HTTP layer validates inputs, reads through the repository and wraps
every answer, including errors, in the ApiResponse envelope.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from quill import __version__
from quill.api.dependencies import get_db_session
from quill.api.envelope import failure
from quill.config import Settings, configure_logging, get_settings
from quill.db.session import get_engine, init_db, warm_pool
from quill.errors import InvalidPageRequestError, StoreUnavailableError
from quill.models.types import HealthResponse

logger = logging.getLogger(__name__)

# Re-export for dependency overrides
__all__ = ["app", "create_app", "get_db_session"]


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=failure(message).model_dump(mode="json"))


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        logger.error(
            "Store unavailable on %s %s: %s", request.method, request.url.path, exc.__cause__
        )
        return _error_response(503, "Backend unavailable")

    @app.exception_handler(InvalidPageRequestError)
    async def invalid_page_request(request: Request, exc: InvalidPageRequestError) -> JSONResponse:
        return _error_response(422, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_failed(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(422, _format_validation_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Optional settings; defaults to the environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        engine = get_engine(settings.database_url, pool_max_size=settings.pool_max_size)
        if settings.create_schema:
            await run_in_threadpool(init_db, settings.database_url)
        if settings.pool_min_connections > 0:
            await run_in_threadpool(warm_pool, engine, settings.pool_min_connections)
        yield

    app = FastAPI(
        title="Quill API",
        description="Published posts and tags with search, sort and pagination",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # Include routes
    from quill.api.routes import posts, tags

    app.include_router(posts.router)
    app.include_router(tags.router)

    @app.get("/", response_model=HealthResponse)
    @app.get("/v1/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(success=True, message="ok")

    return app


# Default app instance
app = create_app()
