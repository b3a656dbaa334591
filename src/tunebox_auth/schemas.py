"""Auth schemas and data structures.

These are simple data classes used for transferring identity
and token data between components.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class Identity:
    """A registered identity.

    Identity records are created on registration and never mutated.

    Attributes
    ----------
    id
        Opaque unique identifier
    email
        Unique email address (exact match)
    username
        Unique username (compared case-insensitively)
    password_hash
        bcrypt hash of the password
    created_at
        Registration timestamp
    """

    id: UUID
    email: str
    username: str
    password_hash: str = field(repr=False)
    created_at: datetime = field(default_factory=_utc_now)

    @property
    def username_normalized(self) -> str:
        return normalize_username(self.username)


def normalize_username(username: str) -> str:
    """Key used for case-insensitive username uniqueness."""
    return username.lower()


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    This represents the data extracted from a verified JWT token.

    Attributes
    ----------
    user_id
        The subject identity id
    exp
        Token expiration timestamp
    token_type
        Either "access" or "refresh"
    email
        Email claim (access tokens only)
    username
        Username claim (access tokens only)
    jti
        Unique token id
    """

    user_id: UUID
    exp: datetime
    token_type: str
    email: str | None = None
    username: str | None = None
    jti: str | None = None

    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return datetime.now(tz=self.exp.tzinfo) > self.exp

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.token_type == ACCESS_TOKEN_TYPE

    def is_refresh_token(self) -> bool:
        """Check if this is a refresh token."""
        return self.token_type == REFRESH_TOKEN_TYPE
