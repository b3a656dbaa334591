"""Abstract interface for the refresh token revocation registry.

The registry holds the single currently valid refresh token per identity.
Storing a new token for an identity replaces (and thereby revokes) the
previous one.
"""

from abc import ABC, abstractmethod
from uuid import UUID


class RefreshTokenRegistry(ABC):
    """Registry mapping identity id to its current refresh token."""

    @abstractmethod
    async def put(self, identity_id: UUID, token: str) -> None:
        """Store ``token`` as the only valid refresh token for the identity."""

    @abstractmethod
    async def get(self, identity_id: UUID) -> str | None:
        """Return the current refresh token, or None if there is none."""

    @abstractmethod
    async def delete(self, identity_id: UUID) -> bool:
        """
        Remove the entry for an identity.

        Returns
        -------
        True if an entry was removed, False if none existed
        """
