"""Async session client for the Tunebox API."""

from tunebox.client.exceptions import (
    ApiError,
    NotAuthenticatedError,
    SessionClientError,
    SessionExpiredError,
)
from tunebox.client.models import AuthUser, IdentityClaims
from tunebox.client.session_client import SessionClient
from tunebox.client.single_flight import SingleFlight
from tunebox.client.token_store import (
    AccessTokenStore,
    FileTokenStore,
    MemoryTokenStore,
)

__all__ = [
    "AccessTokenStore",
    "ApiError",
    "AuthUser",
    "FileTokenStore",
    "IdentityClaims",
    "MemoryTokenStore",
    "NotAuthenticatedError",
    "SessionClient",
    "SessionClientError",
    "SessionExpiredError",
    "SingleFlight",
]
