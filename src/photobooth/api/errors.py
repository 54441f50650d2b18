"""Exception handlers mapping errors onto JSON or plain-text responses."""

import logging
from collections.abc import Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from photobooth.domain.errors import PhotoboothError

ADMIN_PREFIX = "/admin"

logger = logging.getLogger(__name__)


def error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Plain text for admin pages, ``{"error": ...}`` everywhere else."""
    if request.url.path.startswith(ADMIN_PREFIX):
        return PlainTextResponse(message, status_code=status_code, headers=headers)
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers so every failure carries the matching status."""

    @app.exception_handler(PhotoboothError)
    async def handle_photobooth_error(
        request: Request, exc: PhotoboothError
    ) -> Response:
        return error_response(request, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        return error_response(request, exc.status_code, str(exc.detail), exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> Response:
        return error_response(request, 422, "Invalid request parameters")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> Response:
        logger.exception(
            "Unhandled error", extra={"path": request.url.path}, exc_info=exc
        )
        return error_response(request, 500, "Internal server error")
