"""Application error taxonomy and the handlers that render it as ``{"message": ...}``."""

from __future__ import annotations

import logging
import re
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("errors")


class AppError(Exception):
    """Base error carrying an HTTP status and a human-readable message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, *, headers: Optional[dict[str, str]] = None) -> None:
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class BusinessRuleError(AppError):
    """Rejected by a booking rule. Reported as 400, not 409."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request violates a business rule"


# ----- Event / booking errors -----

class MissingFields(ValidationError):
    default_message = (
        "Missing required event fields: title, date, time, location, description, category, capacity"
    )


class InvalidDate(ValidationError):
    default_message = "Invalid date format. Please use YYYY-MM-DD."


class InvalidIdFormat(ValidationError):
    default_message = "Invalid event ID format"


class EventNotFound(NotFound):
    default_message = "Event not found"


class HostNotFound(NotFound):
    default_message = "Host user not found."


class BookerNotFound(NotFound):
    default_message = "Booking user not found."


class SelfBookingForbidden(BusinessRuleError):
    default_message = "Hosts cannot book their own events."


class SoldOut(BusinessRuleError):
    default_message = "Event is sold out. Capacity reached."


# ----- Handlers -----

_UNIQUE_FIELD_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),  # sqlite
    re.compile(r"Key \((\w+)\)=\("),  # postgres
)


def duplicate_field(exc: IntegrityError) -> Optional[str]:
    """Extract the offending column from a unique-constraint violation, if any."""

    text = str(exc.orig) if exc.orig is not None else str(exc)
    for pattern in _UNIQUE_FIELD_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return f"Validation Error: {'. '.join(parts)}"


def _message(status_code: int, message: str, headers: Optional[dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _message(exc.status_code, exc.message, exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return _message(exc.status_code, detail, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        return _message(status.HTTP_400_BAD_REQUEST, _format_validation_errors(exc))

    @app.exception_handler(IntegrityError)
    async def _integrity_error(request: Request, exc: IntegrityError):
        field = duplicate_field(exc)
        if field:
            return _message(
                status.HTTP_400_BAD_REQUEST,
                f"Duplicate field value entered for {field}. Please use another value.",
            )
        logger.error("Integrity error on %s %s", request.method, request.url.path, exc_info=exc)
        return _message(status.HTTP_400_BAD_REQUEST, "Request conflicts with stored data")

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, AppError.default_message)
