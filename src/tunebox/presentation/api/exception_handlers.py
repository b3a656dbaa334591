"""Translate exceptions into ``{"detail": ..., "code": ...}`` JSON bodies.

Auth errors carry an ``ErrorCode``; the code picks the HTTP status. Request
body validation failures become 400 ``VALIDATION_ERROR`` rather than
FastAPI's default 422, and anything else becomes an opaque 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tunebox_auth.exceptions import (
    AuthDomainError,
    AuthError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_BAD_REQUEST = (ErrorCode.VALIDATION_ERROR, ErrorCode.WEAK_PASSWORD)
_UNAUTHORIZED = (
    ErrorCode.AUTHENTICATION_FAILED,
    ErrorCode.INVALID_CREDENTIALS,
    ErrorCode.INVALID_TOKEN,
)
_NOT_FOUND = (ErrorCode.NOT_FOUND, ErrorCode.IDENTITY_NOT_FOUND)
_CONFLICT = (
    ErrorCode.CONFLICT,
    ErrorCode.EMAIL_ALREADY_EXISTS,
    ErrorCode.USERNAME_ALREADY_EXISTS,
)

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    **dict.fromkeys(_BAD_REQUEST, status.HTTP_400_BAD_REQUEST),
    **dict.fromkeys(_UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED),
    **dict.fromkeys(_NOT_FOUND, status.HTTP_404_NOT_FOUND),
    **dict.fromkeys(_CONFLICT, status.HTTP_409_CONFLICT),
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Checked in order when an error code has no explicit entry
_STATUS_BY_TYPE: tuple[tuple[type[AuthDomainError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def status_for(exc: AuthDomainError) -> int:
    """HTTP status for an auth error, by code first and class second."""
    mapped = ERROR_CODE_TO_STATUS.get(exc.code)
    if mapped is not None:
        return mapped
    for exc_type, status_code in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    status_code: int,
    detail: str,
    code: str,
) -> JSONResponse:
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code},
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Install the auth, request-validation and fallback handlers on ``app``."""

    @app.exception_handler(AuthDomainError)
    async def handle_auth_error(
        request: Request,
        exc: AuthDomainError,
    ) -> JSONResponse:
        # exc.details stays in the log; clients only see the message
        logger.warning(
            "%s %s -> %s: %s %s",
            request.method,
            request.url.path,
            exc.code.value,
            exc.message,
            exc.details or "",
        )
        return error_response(status_for(exc), exc.message, exc.code.value)

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_request(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.info(
            "%s %s -> malformed body: %s",
            request.method,
            request.url.path,
            exc.errors(),
        )
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Malformed request",
            ErrorCode.VALIDATION_ERROR.value,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception("%s %s -> unhandled error", request.method, request.url.path)
        detail = "An unexpected error occurred"
        if request.app.state.settings.api_debug:
            detail = f"{type(exc).__name__}: {exc}"
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail,
            ErrorCode.INTERNAL_ERROR.value,
        )
