"""Domain errors and their translation to HTTP responses.

Services raise these errors; the handlers registered by
:func:`setup_exception_handlers` turn them into ``{"error": message}`` JSON
bodies with the matching status code. Anything else is logged and answered
with a generic 500.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal server error occurred. Please try again later."


class MSGAError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MSGAError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class AuthError(MSGAError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed."


class NoTokenError(AuthError):
    default_message = "No token provided. Please log in."


class MalformedTokenError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Malformed authorization header. Please log in again."


class InvalidTokenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token. Please log in again."


class RevokedError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Token has been revoked. Please log in again."


class ForbiddenError(MSGAError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not authorized to access this resource."


class NotFoundError(MSGAError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found."


class ConflictError(MSGAError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists."


class RateLimitError(MSGAError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests, please try again later."


class InternalError(MSGAError):
    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _msga_error_handler(request: Request, exc: MSGAError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info(
            "%s %s rejected with %d: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return error_response(exc.status_code, exc.message)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = ValidationError.default_message
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain, validation and catch-all handlers on ``app``."""

    app.add_exception_handler(MSGAError, _msga_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
