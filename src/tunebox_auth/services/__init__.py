"""Authentication services.

Provides password hashing and JWT token management.
"""

from tunebox_auth.services.jwt_service import JWTService
from tunebox_auth.services.password_service import PasswordHashingService

__all__ = [
    "JWTService",
    "PasswordHashingService",
]
