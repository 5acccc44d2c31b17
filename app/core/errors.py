"""Domain error taxonomy and the JSON error envelope.

Services raise :class:`LMSError` subclasses; the handlers registered by
:func:`register_exception_handlers` turn them (and framework errors) into the
``{"status": "error", "message": ..., "data": ...}`` shape every client relies
on.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class LMSError(Exception):
    """Base class for failures that map onto a declared error kind."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "internal_error"

    def __init__(self, message: str, data: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.data = data


class NotFoundError(LMSError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"


class ForbiddenError(LMSError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"


class ConflictError(LMSError):
    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"


class ValidationError(LMSError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "validation_error"


class UpstreamFailure(LMSError):
    """A persistence call failed for reasons unrelated to the request itself."""

    kind = "upstream_failure"


class InternalError(LMSError):
    kind = "internal_error"


def error_payload(message: str, data: Any = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"status": "error", "message": message}
    if data is not None:
        payload["data"] = data
    return payload


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    field = ".".join(location)
    message = first.get("msg", "invalid value")
    if field:
        return f"Invalid {field}: {message}"
    return f"Invalid request: {message}"


async def lms_error_handler(request: Request, exc: LMSError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message, exc.data))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(message),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(_describe_validation_error(exc)),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=UpstreamFailure.status_code,
        content=error_payload("Database operation failed"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=InternalError.status_code,
        content=error_payload("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LMSError, lms_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
