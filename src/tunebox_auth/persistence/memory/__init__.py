"""In-memory implementation for tunebox_auth persistence."""

from tunebox_auth.persistence.memory.store import (
    InMemoryAuthStore,
    InMemoryAuthStoreProvider,
    InMemoryIdentityRepository,
    InMemoryRefreshTokenRegistry,
)

__all__ = [
    "InMemoryAuthStore",
    "InMemoryAuthStoreProvider",
    "InMemoryIdentityRepository",
    "InMemoryRefreshTokenRegistry",
]
