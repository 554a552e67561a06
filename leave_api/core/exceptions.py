"""Domain errors and the handlers that render them as ``{"error": ...}``.

Handlers raise these instead of ``HTTPException`` so the services stay
independent of FastAPI; ``register_exception_handlers`` maps them to
status codes at the application boundary.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"


class LeaveServiceError(Exception):
    """Base class for errors that are reported to the caller."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LeaveServiceError):
    """Malformed or rule-breaking input."""


class ConflictError(LeaveServiceError):
    """Duplicate same-day submission. Reported as 400 like other input errors."""


class NotFoundError(LeaveServiceError):
    status_code = status.HTTP_404_NOT_FOUND


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_request_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid request: {location}: {first.get('msg', 'invalid value')}"
    return f"Invalid request: {first.get('msg', 'invalid value')}"


async def leave_service_error_handler(request: Request, exc: LeaveServiceError):
    return error_response(exc.status_code, exc.message)


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, _describe_request_error(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LeaveServiceError, leave_service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
