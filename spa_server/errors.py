"""Structured JSON error responses and the error-handling middleware."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from spa_server.config import Settings

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR = "Ruta no encontrada"
INTERNAL_ERROR = "Error interno del servidor"
GENERIC_ERROR_MESSAGE = "Algo salió mal"


def not_found_response(request: Request) -> JSONResponse:
    """404 body naming the path and method nothing could resolve."""
    return JSONResponse(
        status_code=404,
        content={
            "error": NOT_FOUND_ERROR,
            "path": request.url.path,
            "method": request.method,
        },
    )


def internal_error_response(exc: Exception, settings: Settings) -> JSONResponse:
    """
    500 body for an unhandled error.

    The exception message is only disclosed in development mode;
    everywhere else a generic message is returned instead.
    """
    message = str(exc) if settings.is_development else GENERIC_ERROR_MESSAGE
    return JSONResponse(
        status_code=500,
        content={"error": INTERNAL_ERROR, "message": message},
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn any exception raised while handling a request into a JSON 500."""

    def __init__(self, app, settings: Settings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                f"Unhandled error serving {request.method} {request.url.path}: {e}"
            )
            return internal_error_response(e, self.settings)
