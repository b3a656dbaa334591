"""SQLAlchemy implementations of the auth repositories.

Provides data access for IdentityModel and RefreshTokenModel, plus the
provider that owns the async engine for the lifetime of the process.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timezone
from pathlib import Path
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tunebox_auth.exceptions import (
    ConflictError,
    EmailAlreadyExistsError,
    UsernameAlreadyExistsError,
)
from tunebox_auth.persistence.sqlalchemy.base import AuthBase
from tunebox_auth.persistence.sqlalchemy.models import (
    IdentityModel,
    RefreshTokenModel,
    utc_now,
)
from tunebox_auth.repositories import (
    AuthStore,
    AuthStoreProvider,
    IdentityRepository,
    RefreshTokenRegistry,
)
from tunebox_auth.schemas import Identity, normalize_username

logger = logging.getLogger(__name__)


class IdentityRepositorySQLAlchemy(IdentityRepository):
    """
    SQLAlchemy implementation of IdentityRepository.

    Uniqueness is checked up front for a precise error, and backed by
    unique constraints for concurrent inserts.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session.

        Parameters
        ----------
        session
            SQLAlchemy async session
        """
        self._session = session

    def _to_identity(self, model: IdentityModel) -> Identity:
        """Map SQLAlchemy model to the identity record."""
        created_at = model.created_at
        # SQLite drops tzinfo on load
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Identity(
            id=model.id,
            email=model.email,
            username=model.username,
            password_hash=model.password_hash,
            created_at=created_at,
        )

    async def _find_one(self, *criteria) -> Identity | None:
        stmt = select(IdentityModel).where(*criteria)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_identity(model) if model else None

    async def add(self, identity: Identity) -> Identity:
        await self._raise_if_taken(identity)

        model = IdentityModel(
            id=identity.id,
            email=identity.email,
            username=identity.username,
            username_normalized=identity.username_normalized,
            password_hash=identity.password_hash,
            created_at=identity.created_at,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            # Lost a race against a concurrent registration; the winner may
            # not have committed yet, so the lookup can come back empty
            await self._session.rollback()
            await self._raise_if_taken(identity)
            raise ConflictError(
                "Email or username already registered",
                details={"email": identity.email, "username": identity.username},
            ) from e

        logger.info("Created identity: %s", identity.id)
        return identity

    async def _raise_if_taken(self, identity: Identity) -> None:
        if await self.find_by_email(identity.email) is not None:
            raise EmailAlreadyExistsError(identity.email)
        if await self.find_by_username(identity.username) is not None:
            raise UsernameAlreadyExistsError(identity.username)

    async def find_by_id(self, identity_id: UUID) -> Identity | None:
        return await self._find_one(IdentityModel.id == identity_id)

    async def find_by_email(self, email: str) -> Identity | None:
        return await self._find_one(IdentityModel.email == email)

    async def find_by_username(self, username: str) -> Identity | None:
        return await self._find_one(
            IdentityModel.username_normalized == normalize_username(username),
        )

    async def count(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(IdentityModel),
        )
        return int(result.scalar_one())


class RefreshTokenRegistrySQLAlchemy(RefreshTokenRegistry):
    """SQLAlchemy implementation of the refresh token registry."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def put(self, identity_id: UUID, token: str) -> None:
        existing = await self._session.get(RefreshTokenModel, identity_id)
        if existing:
            existing.token = token
            existing.issued_at = utc_now()
        else:
            self._session.add(RefreshTokenModel(user_id=identity_id, token=token))
        await self._session.flush()

    async def get(self, identity_id: UUID) -> str | None:
        model = await self._session.get(RefreshTokenModel, identity_id)
        return model.token if model else None

    async def delete(self, identity_id: UUID) -> bool:
        model = await self._session.get(RefreshTokenModel, identity_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True


class SQLAlchemyAuthStore(AuthStore):
    """Auth store bound to a single AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._identities = IdentityRepositorySQLAlchemy(session)
        self._refresh_tokens = RefreshTokenRegistrySQLAlchemy(session)

    @property
    def identities(self) -> IdentityRepositorySQLAlchemy:
        return self._identities

    @property
    def refresh_tokens(self) -> RefreshTokenRegistrySQLAlchemy:
        return self._refresh_tokens

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()


class SQLAlchemyAuthStoreProvider(AuthStoreProvider):
    """
    Owns the shared async engine and its connection pool.

    One AsyncSession (and therefore one transaction) per unit of work.
    """

    def __init__(
        self,
        database_url: str | None = None,
        engine: AsyncEngine | None = None,
    ):
        if engine is None:
            if not database_url:
                msg = "Either database_url or engine is required"
                raise ValueError(msg)
            _ensure_sqlite_directory(database_url)
            engine = create_async_engine(
                database_url,
                echo=False,
                pool_pre_ping=True,
            )

        self._engine = engine
        self._session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def initialize(self) -> None:
        """Create missing tables (idempotent)."""
        logger.info("Ensuring auth tables exist...")
        async with self._engine.begin() as conn:
            await conn.run_sync(AuthBase.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()
        logger.info("Auth database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[SQLAlchemyAuthStore]:
        async with self._session_maker() as session:
            try:
                yield SQLAlchemyAuthStore(session)
            except BaseException:
                await session.rollback()
                raise


def _ensure_sqlite_directory(database_url: str) -> None:
    if database_url.startswith("sqlite") and ":memory:" not in database_url:
        db_path = database_url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
