from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

from cat_registry.api.errors import setup_exception_handlers
from cat_registry.api.routes import register_routes
from cat_registry.core.config import Settings, get_settings
from cat_registry.core.logging import setup_logging
from cat_registry.infrastructure.db import Database

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


async def bind_request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line of a request with its id, path and method."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    bind_contextvars(request_id=request_id, path=request.url.path, method=request.method)
    try:
        response = await call_next(request)
    finally:
        clear_contextvars()
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def build_lifespan(settings: Settings) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.database = Database.from_settings(settings)
        await logger.ainfo("service_startup", service=settings.app_name, environment=settings.environment)
        try:
            yield
        finally:
            await app.state.database.dispose()
            await logger.ainfo("service_shutdown", service=settings.app_name)

    return lifespan


def create_app() -> FastAPI:
    """Application factory for the public API."""
    setup_logging()
    settings = get_settings()

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=build_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_local else settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(bind_request_context)

    setup_exception_handlers(app)
    register_routes(app)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    return app


app = create_app()
