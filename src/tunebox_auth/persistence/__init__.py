"""Persistence implementations for tunebox_auth.

- memory: process-local store for development and tests
- sqlalchemy: database-backed store (SQLite via aiosqlite, PostgreSQL via asyncpg)
"""

from tunebox_auth.persistence.memory import InMemoryAuthStoreProvider
from tunebox_auth.persistence.sqlalchemy import SQLAlchemyAuthStoreProvider

__all__ = [
    "InMemoryAuthStoreProvider",
    "SQLAlchemyAuthStoreProvider",
]
