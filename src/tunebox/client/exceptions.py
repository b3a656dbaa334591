"""Exceptions raised by the session client."""


class SessionClientError(Exception):
    """Base exception for session client failures."""


class ApiError(SessionClientError):
    """The API answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        detail: str | None = None,
        code: str | None = None,
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        super().__init__(f"HTTP {status_code}: {detail or 'request failed'}")


class SessionExpiredError(SessionClientError):
    """The refresh exchange failed; the user must log in again."""

    def __init__(self, message: str = "Session expired, please log in again"):
        super().__init__(message)


class NotAuthenticatedError(SessionClientError):
    """An operation needs an access token but none is cached."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)
