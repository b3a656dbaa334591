"""Unit-of-work style store bundling the auth repositories.

A provider is constructed once at process start and hands out an
``AuthStore`` per request. Request handlers never touch module level
state; they receive the store through dependency injection.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from tunebox_auth.repositories.identity_repository import IdentityRepository
from tunebox_auth.repositories.refresh_token_registry import RefreshTokenRegistry


class AuthStore(ABC):
    """Handle on the identity repository and refresh token registry."""

    @property
    @abstractmethod
    def identities(self) -> IdentityRepository:
        """Identity records."""

    @property
    @abstractmethod
    def refresh_tokens(self) -> RefreshTokenRegistry:
        """Refresh token revocation registry."""

    @abstractmethod
    async def commit(self) -> None:
        """Persist pending changes."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard pending changes."""


class AuthStoreProvider(ABC):
    """Owns the storage backend for the lifetime of the process."""

    async def initialize(self) -> None:  # noqa: B027
        """Prepare the backend (create tables, open pools)."""

    async def close(self) -> None:  # noqa: B027
        """Release backend resources."""

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[AuthStore]:
        """
        Open a store for one unit of work.

        Changes are persisted by ``AuthStore.commit``. Uncommitted work
        is rolled back when the block raises and discarded on exit.
        """

