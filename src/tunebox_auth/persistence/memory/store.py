"""In-memory implementation of the auth store.

Process-local dictionaries guarded by a single ``asyncio.Lock``. Suitable
for development and tests; records are lost on restart. Writes are
applied immediately, so ``commit`` and ``rollback`` are no-ops.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from tunebox_auth.exceptions import EmailAlreadyExistsError, UsernameAlreadyExistsError
from tunebox_auth.repositories import (
    AuthStore,
    AuthStoreProvider,
    IdentityRepository,
    RefreshTokenRegistry,
)
from tunebox_auth.schemas import Identity, normalize_username

logger = logging.getLogger(__name__)


class InMemoryIdentityRepository(IdentityRepository):
    """Identity records indexed by id, email and normalized username."""

    def __init__(self, lock: asyncio.Lock | None = None):
        self._lock = lock or asyncio.Lock()
        self._by_id: dict[UUID, Identity] = {}
        self._by_email: dict[str, Identity] = {}
        self._by_username: dict[str, Identity] = {}

    async def add(self, identity: Identity) -> Identity:
        async with self._lock:
            if identity.email in self._by_email:
                raise EmailAlreadyExistsError(identity.email)
            if identity.username_normalized in self._by_username:
                raise UsernameAlreadyExistsError(identity.username)

            self._by_id[identity.id] = identity
            self._by_email[identity.email] = identity
            self._by_username[identity.username_normalized] = identity

        logger.debug("Stored identity %s", identity.id)
        return identity

    async def find_by_id(self, identity_id: UUID) -> Identity | None:
        return self._by_id.get(identity_id)

    async def find_by_email(self, email: str) -> Identity | None:
        return self._by_email.get(email)

    async def find_by_username(self, username: str) -> Identity | None:
        return self._by_username.get(normalize_username(username))

    async def count(self) -> int:
        return len(self._by_id)


class InMemoryRefreshTokenRegistry(RefreshTokenRegistry):
    def __init__(self, lock: asyncio.Lock | None = None):
        self._lock = lock or asyncio.Lock()
        self._tokens: dict[UUID, str] = {}

    async def put(self, identity_id: UUID, token: str) -> None:
        async with self._lock:
            self._tokens[identity_id] = token

    async def get(self, identity_id: UUID) -> str | None:
        return self._tokens.get(identity_id)

    async def delete(self, identity_id: UUID) -> bool:
        async with self._lock:
            return self._tokens.pop(identity_id, None) is not None


class InMemoryAuthStore(AuthStore):
    def __init__(self) -> None:
        lock = asyncio.Lock()
        self._identities = InMemoryIdentityRepository(lock)
        self._refresh_tokens = InMemoryRefreshTokenRegistry(lock)

    @property
    def identities(self) -> InMemoryIdentityRepository:
        return self._identities

    @property
    def refresh_tokens(self) -> InMemoryRefreshTokenRegistry:
        return self._refresh_tokens

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


class InMemoryAuthStoreProvider(AuthStoreProvider):
    """Hands the same process-wide store to every request."""

    def __init__(self, store: InMemoryAuthStore | None = None):
        self._store = store or InMemoryAuthStore()

    @property
    def store(self) -> InMemoryAuthStore:
        return self._store

    @asynccontextmanager
    async def session(self) -> AsyncIterator[InMemoryAuthStore]:
        yield self._store
