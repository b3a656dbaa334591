"""API request/response schemas."""

from tunebox.presentation.api.schemas.auth import (
    AuthResponse,
    IdentityClaimsResponse,
    LoginRequest,
    LogoutResponse,
    MeResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "IdentityClaimsResponse",
    "LoginRequest",
    "LogoutResponse",
    "MeResponse",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
]
