"""Render every error as {statusCode, timestamp, path, message}."""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import settings
from ..utils.clock import now_iso_ms

logger = logging.getLogger(__name__)


def error_response(
    request: Request,
    status_code: int,
    message: Any,
    exc: Exception,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {
        "statusCode": status_code,
        "timestamp": now_iso_ms(),
        "path": request.url.path,
        "message": message,
    }
    if not settings.is_production:
        body["error"] = type(exc).__name__
    return JSONResponse(body, status_code=status_code, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        f"{request.method} {request.url.path} {exc.status_code} - Error: {exc.detail}"
    )
    return error_response(request, exc.status_code, exc.detail, exc, getattr(exc, "headers", None))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])

    logger.warning(f"{request.method} {request.url.path} 400 - Validation failed: {messages}")
    return error_response(request, status.HTTP_400_BAD_REQUEST, messages, exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} 500 - Unhandled error: {str(exc)}")
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", exc
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
