"""Abstract repository interface for identity records.

This interface defines the contract for identity persistence.
Implementations can keep records in memory, use SQLAlchemy, or any
other storage.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from tunebox_auth.schemas import Identity


class IdentityRepository(ABC):
    """
    Abstract repository interface for identity records.

    Implementations must enforce the uniqueness invariants atomically:
    no two identities share an email, and no two identities share a
    case-insensitively equal username.
    """

    @abstractmethod
    async def add(self, identity: Identity) -> Identity:
        """
        Store a new identity.

        Parameters
        ----------
        identity
            The identity to store

        Returns
        -------
        The stored identity

        Raises
        ------
        EmailAlreadyExistsError
            If the email is already registered
        UsernameAlreadyExistsError
            If the username is already registered (case-insensitive)
        """

    @abstractmethod
    async def find_by_id(self, identity_id: UUID) -> Identity | None:
        """Find an identity by its id."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Identity | None:
        """Find an identity by exact email."""

    @abstractmethod
    async def find_by_username(self, username: str) -> Identity | None:
        """Find an identity by username, ignoring case."""

    @abstractmethod
    async def count(self) -> int:
        """Number of stored identities."""
