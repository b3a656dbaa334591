"""Tunebox Auth - Token based authentication core.

This package provides authentication infrastructure that is independent
of the web framework. It handles:
- Password hashing (bcrypt)
- Access/refresh JWT creation and verification with separate secrets
- Identity storage and the refresh token revocation registry

Architecture:
    tunebox_auth/
    ├── services/           # Pure logic (password hashing, JWT)
    ├── repositories/       # Abstract interfaces
    ├── persistence/        # Implementations by technology
    │   ├── memory/         # Process-local dictionaries
    │   └── sqlalchemy/     # SQLAlchemy implementation
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from tunebox_auth import JWTService, PasswordHashingService
    from tunebox_auth.persistence import InMemoryAuthStoreProvider
"""

from tunebox_auth.exceptions import (
    AuthDomainError,
    AuthError,
    ConflictError,
    EmailAlreadyExistsError,
    ErrorCode,
    IdentityNotFoundError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    UsernameAlreadyExistsError,
    ValidationError,
    WeakPasswordError,
)
from tunebox_auth.repositories import (
    AuthStore,
    AuthStoreProvider,
    IdentityRepository,
    RefreshTokenRegistry,
)
from tunebox_auth.schemas import Identity, TokenPayload
from tunebox_auth.services import JWTService, PasswordHashingService

__all__ = [
    # Services
    "JWTService",
    "PasswordHashingService",
    # Repositories (interfaces)
    "AuthStore",
    "AuthStoreProvider",
    "IdentityRepository",
    "RefreshTokenRegistry",
    # Schemas
    "Identity",
    "TokenPayload",
    # Exceptions
    "AuthDomainError",
    "AuthError",
    "ConflictError",
    "EmailAlreadyExistsError",
    "ErrorCode",
    "IdentityNotFoundError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NotFoundError",
    "UsernameAlreadyExistsError",
    "ValidationError",
    "WeakPasswordError",
]
