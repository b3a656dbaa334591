"""SQLAlchemy models for identities and the refresh token registry."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tunebox_auth.persistence.sqlalchemy.base import AuthBase


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


class IdentityModel(AuthBase):
    """
    SQLAlchemy model for identity records.

    Uniqueness of email and of the lowercased username is enforced by
    the database, so concurrent registrations cannot both succeed.

    Table: identities
    """

    __tablename__ = "identities"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)

    email: Mapped[str] = mapped_column(
        String(320),
        unique=True,
        nullable=False,
        index=True,
    )
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    username_normalized: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )

    # bcrypt format, ~60 chars
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<IdentityModel(id={self.id}, email={self.email})>"


class RefreshTokenModel(AuthBase):
    """
    The single currently valid refresh token per identity.

    Table: refresh_tokens
    """

    __tablename__ = "refresh_tokens"

    # No FK to stay decoupled from the identities table
    user_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)

    token: Mapped[str] = mapped_column(Text, nullable=False)

    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<RefreshTokenModel(user_id={self.user_id})>"
