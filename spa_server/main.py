"""FastAPI application entry point: static assets with SPA fallback."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional, Sequence

from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from spa_server.config import Settings, get_settings
from spa_server.errors import ErrorHandlingMiddleware, not_found_response
from spa_server.resolvers import DEFAULT_RESOLVERS, Resolver, resolve

logger = logging.getLogger(__name__)


def log_startup(settings: Settings) -> None:
    """Log where assets are served from and whether the build output exists."""
    logger.info("SPA server started")
    logger.info(f"Serving files from: {settings.DIST_DIR}")
    logger.info(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    # Advisory only: the directory may be deployed after startup
    if not settings.DIST_DIR.exists():
        logger.warning(f'Asset directory "{settings.DIST_DIR}" does not exist.')
        logger.warning("Make sure the client application has been built (e.g. npm run build).")
    else:
        logger.info("Asset directory found")


class SPAEndpoint:
    """
    ASGI endpoint behind the catch-all route.

    Being a plain ASGI callable rather than a function, the route places no
    restriction on the HTTP method, so TRACE, PROPFIND and friends reach the
    resolvers as well. Filesystem checks run in the threadpool.
    """

    def __init__(self, settings: Settings, resolvers: Sequence[Resolver]) -> None:
        self.settings = settings
        self.resolvers = tuple(resolvers)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        response = await run_in_threadpool(resolve, request, self.settings, self.resolvers)
        if response is None:
            response = not_found_response(request)
        await response(scope, receive, send)


def create_app(
    settings: Optional[Settings] = None,
    resolvers: Sequence[Resolver] = DEFAULT_RESOLVERS,
) -> FastAPI:
    """Build the application around an immutable settings instance."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown events."""
        log_startup(settings)
        yield

    app = FastAPI(
        title="SPA Static Server",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    app.add_middleware(ErrorHandlingMiddleware, settings=settings)

    # Every path and method belongs to the SPA: static file, then index.html, then 404
    app.add_route(
        "/{full_path:path}",
        SPAEndpoint(settings, resolvers),
        include_in_schema=False,
    )

    return app


app = create_app()
