"""Exception handlers mapping pipeline errors onto ``{"error": ...}`` responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.errors import (
    ExtractionError,
    ExtractionTimeoutError,
    ModelInvocationError,
    ModelTimeoutError,
    NewsdeskError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific class first; the first isinstance match wins
ERROR_STATUS_CODES: list[tuple[type[NewsdeskError], int]] = [
    (ValidationError, 400),
    (ModelTimeoutError, 504),
    (ModelInvocationError, 500),
    (ExtractionTimeoutError, 504),
    (ExtractionError, 500),
]


def status_code_for(exc: NewsdeskError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 500


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers so every failure has the same body shape."""

    @app.exception_handler(NewsdeskError)
    async def handle_newsdesk_error(request: Request, exc: NewsdeskError) -> JSONResponse:
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed ({status_code}): {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected ({status_code}): {exc.message}")
        return error_response(status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()) if part != 'body')}: {error.get('msg')}"
            for error in exc.errors()
        )
        logger.info(f"{request.method} {request.url.path} invalid request: {problems}")
        return error_response(400, f"Invalid request: {problems}")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"{request.method} {request.url.path} crashed: {exc}")
        return error_response(500, f"Server error: {exc}")
