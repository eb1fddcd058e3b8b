"""
Application error taxonomy

Services raise these; main.py maps them to JSON responses of the form
{"detail": <message>, "code": <code>}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, ProgrammingError

from .config import DEBUG_ERRORS

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response"""

    status_code = 500
    code = "internal_error"
    default_message = "Server error"

    def __init__(self, message: str | None = None, headers: dict | None = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class AuthRequired(AppError):
    status_code = 401
    code = "auth_required"
    default_message = "Access token required"


class AuthInvalid(AppError):
    status_code = 403
    code = "auth_invalid"
    default_message = "Invalid token"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"
    default_message = "You are not allowed to perform this action"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    code = "conflict"
    default_message = "Conflict"


class InvalidTransition(AppError):
    """A booking action that the current booking status does not allow"""

    status_code = 409
    code = "invalid_transition"
    default_message = "This action is not allowed for the booking's current status"


class ValidationFailure(AppError):
    status_code = 422
    code = "validation_failed"
    default_message = "Invalid request"


class RateLimited(AppError):
    status_code = 429
    code = "rate_limited"
    default_message = "Too many requests"


class StoreUnavailable(AppError):
    status_code = 503
    code = "store_unavailable"
    default_message = "Database is not initialized"


class Internal(AppError):
    status_code = 500
    code = "internal_error"
    default_message = "Server error"


def error_response(error: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.message, "code": error.code},
        headers=error.headers,
    )


def is_missing_table(exc: Exception) -> bool:
    """True for undefined-table errors (PostgreSQL 42P01, SQLite "no such table")"""
    pgcode = getattr(getattr(exc, "orig", None), "pgcode", None)
    if pgcode is not None:
        return pgcode == "42P01"
    return "no such table" in str(exc).lower()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.code}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} - {exc.code}: {exc.message}")
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder({"detail": exc.errors(), "code": ValidationFailure.code}),
        )

    @app.exception_handler(OperationalError)
    @app.exception_handler(ProgrammingError)
    async def store_error_handler(request: Request, exc: Exception):
        if is_missing_table(exc):
            logger.error(f"❌ {request.url.path}: database schema missing: {exc}")
            return error_response(StoreUnavailable())
        logger.error(f"❌ {request.url.path}: database error: {exc}")
        return error_response(Internal(str(exc) if DEBUG_ERRORS else None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(Internal(str(exc) if DEBUG_ERRORS else None))
