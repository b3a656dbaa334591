"""SQLAlchemy declarative base for tunebox_auth models.

Examples
--------
# In Alembic env.py:
from tunebox_auth.persistence.sqlalchemy import AuthBase

target_metadata = AuthBase.metadata
"""

from sqlalchemy.orm import DeclarativeBase


class AuthBase(DeclarativeBase):
    """Declarative base for tunebox_auth models."""
