"""
git-for-me-dear-ai FastAPI Application Entry Point.

This module initializes the FastAPI application with:
- Request ID injection and request logging middleware
- Lifespan context management (tool catalogue)
- Exception handlers mapping dispatch errors onto HTTP statuses
- Router mounting
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from apps import __version__
from apps.core_api.middleware import RequestIDMiddleware, RequestLoggingMiddleware
from apps.core_api.routers import health, metrics, tools
from gitai_config.settings import Settings
from gitai_obs.logging import get_logger
from gitai_tools.catalogue import create_dispatcher
from gitai_tools.dispatcher import ToolDispatcher
from gitai_tools.exceptions import (
    DispatchError,
    InvalidToolArgumentsError,
    ToolNotFoundError,
)

logger = get_logger(__name__)

# dispatch error -> HTTP status; anything else is a 500
DISPATCH_ERROR_STATUS = {
    ToolNotFoundError: 404,
    InvalidToolArgumentsError: 422,
}


def status_for(exc: DispatchError) -> int:
    for error_type, status_code in DISPATCH_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


def create_app(
    dispatcher: ToolDispatcher | None = None, settings: Settings | None = None
) -> FastAPI:
    """
    Build the API application.

    With ``dispatcher`` given the catalogue is used as is; otherwise it is
    built from ``settings`` when the application starts.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if getattr(app.state, "dispatcher", None) is None:
            app.state.dispatcher = await create_dispatcher(settings)
        logger.info(
            "api_started",
            environment=settings.ENVIRONMENT,
            tools=len(app.state.dispatcher.registry),
        )
        yield
        logger.info("api_stopped")

    app = FastAPI(
        title="git-for-me-dear-ai API",
        description="Git, GitHub and GitKraken CLI operations as callable tools",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    # ========================================================================
    # MIDDLEWARE
    # ========================================================================

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ========================================================================
    # EXCEPTION HANDLERS
    # ========================================================================

    @app.exception_handler(DispatchError)
    async def dispatch_error_handler(request: Request, exc: DispatchError):
        status_code = status_for(exc)
        logger.warning(
            "dispatch_error",
            path=request.url.path,
            code=exc.code,
            status_code=status_code,
            error=exc.message,
        )
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_exception", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
            },
        )

    # ========================================================================
    # ROUTERS
    # ========================================================================

    app.include_router(tools.router, prefix="/tools", tags=["tools"])
    app.include_router(health.router, prefix="", tags=["health"])
    app.include_router(metrics.router, prefix="", tags=["metrics"])

    @app.get("/", tags=["root"])
    async def root():
        """API information."""
        return {
            "name": "git-for-me-dear-ai",
            "version": __version__,
            "docs": "/docs",
            "health": "/healthz",
            "metrics": "/metrics",
            "endpoints": {
                "list": "GET /tools",
                "describe": "GET /tools/{name}",
                "call": "POST /tools/{name}",
            },
        }

    return app
