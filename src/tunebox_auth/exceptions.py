"""Authentication exceptions and error codes.

These exceptions are raised by the tunebox_auth package and by the
application services built on top of it. The presentation layer maps
them to HTTP responses via their error code.

Credential related failures (``AuthError`` and subclasses) always carry a
generic message. The specific cause is logged, never returned to callers.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine readable codes returned in the ``code`` field of error bodies.

    Clients branch on these values, so existing members keep their spelling.
    """

    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"
    WEAK_PASSWORD = "WEAK_PASSWORD"

    # 401
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"

    # 404
    NOT_FOUND = "NOT_FOUND"
    IDENTITY_NOT_FOUND = "IDENTITY_NOT_FOUND"

    # 409
    CONFLICT = "CONFLICT"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    USERNAME_ALREADY_EXISTS = "USERNAME_ALREADY_EXISTS"

    # 500
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthDomainError(Exception):
    """Root of every error raised by tunebox_auth and the services on top.

    Attributes
    ----------
    message
        Text returned to the client as ``detail``
    code
        Member of ``ErrorCode``; selects the HTTP status
    details
        Extra context for the server log only
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class ValidationError(AuthDomainError):
    """Input was rejected before reaching storage."""

    def __init__(
        self,
        message: str = "Invalid input",
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet the hashing requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message, ErrorCode.WEAK_PASSWORD)


class ConflictError(AuthDomainError):
    """Raised when a unique attribute is already taken."""

    def __init__(
        self,
        message: str = "Resource already exists",
        code: ErrorCode = ErrorCode.CONFLICT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class EmailAlreadyExistsError(ConflictError):
    """Another identity already uses this exact email."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "Email already registered",
            ErrorCode.EMAIL_ALREADY_EXISTS,
            {"email": email},
        )


class UsernameAlreadyExistsError(ConflictError):
    """Username already registered (compared case-insensitively)."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(
            "Username already registered",
            ErrorCode.USERNAME_ALREADY_EXISTS,
            {"username": username},
        )


class AuthError(AuthDomainError):
    """Credential or token failure; always answered with 401."""

    def __init__(
        self,
        message: str = "Authentication error",
        code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login.

    Unknown email and wrong password share this exception and message.
    """

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__(
            "Invalid email or password",
            ErrorCode.INVALID_CREDENTIALS,
            details,
        )


class InvalidTokenError(AuthError):
    """Raised when a token is missing, invalid, expired, revoked or malformed."""

    def __init__(
        self,
        message: str = "Invalid or expired token",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, ErrorCode.INVALID_TOKEN, details)


class NotFoundError(AuthDomainError):
    """A looked-up record does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        code: ErrorCode = ErrorCode.NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class IdentityNotFoundError(NotFoundError):
    """Identity referenced by a valid token no longer exists."""

    def __init__(self, identity_id: object) -> None:
        self.identity_id = identity_id
        super().__init__(
            "User not found",
            ErrorCode.IDENTITY_NOT_FOUND,
            {"identity_id": str(identity_id)},
        )
