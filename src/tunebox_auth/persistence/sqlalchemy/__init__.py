"""SQLAlchemy implementation for tunebox_auth persistence.

Provides:
- AuthBase: Declarative base for auth models
- IdentityModel, RefreshTokenModel: SQLAlchemy models
- Repository implementations and the engine-owning store provider

Examples
--------
# In your Alembic env.py or migration setup:
from tunebox_auth.persistence.sqlalchemy import AuthBase
target_metadata = AuthBase.metadata
"""

from tunebox_auth.persistence.sqlalchemy.base import AuthBase
from tunebox_auth.persistence.sqlalchemy.models import IdentityModel, RefreshTokenModel
from tunebox_auth.persistence.sqlalchemy.repositories import (
    IdentityRepositorySQLAlchemy,
    RefreshTokenRegistrySQLAlchemy,
    SQLAlchemyAuthStore,
    SQLAlchemyAuthStoreProvider,
)

__all__ = [
    "AuthBase",
    "IdentityModel",
    "IdentityRepositorySQLAlchemy",
    "RefreshTokenModel",
    "RefreshTokenRegistrySQLAlchemy",
    "SQLAlchemyAuthStore",
    "SQLAlchemyAuthStoreProvider",
]
