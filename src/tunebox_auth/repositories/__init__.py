"""Repository interfaces for tunebox_auth.

This package defines abstract repository interfaces that can be implemented
by different persistence technologies. Implementations live in
tunebox_auth.persistence.
"""

from tunebox_auth.repositories.auth_store import AuthStore, AuthStoreProvider
from tunebox_auth.repositories.identity_repository import IdentityRepository
from tunebox_auth.repositories.refresh_token_registry import RefreshTokenRegistry

__all__ = [
    "AuthStore",
    "AuthStoreProvider",
    "IdentityRepository",
    "RefreshTokenRegistry",
]
