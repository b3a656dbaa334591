"""Authentication schemas for request/response models.

JSON field names are camelCase (``accessToken``) to match the web client.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    """Request schema for registration.

    Fields are optional here so that missing values are reported by the
    service as a 400 validation error.
    """

    email: str | None = None
    password: str | None = None
    username: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "alice@example.com",
                "password": "secret",
                "username": "alice",
            },
        },
    )


class LoginRequest(CamelModel):
    """Request schema for login."""

    email: str | None = None
    password: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "alice@example.com",
                "password": "secret",
            },
        },
    )


class UserResponse(CamelModel):
    """Public identity fields."""

    id: UUID
    email: str
    username: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(CamelModel):
    """Response schema for register and login.

    The refresh token is never part of the body; it is set as an
    HttpOnly cookie scoped to the refresh endpoint.
    """

    access_token: str
    user: UserResponse
    token_type: str = Field(default="bearer")
    expires_in: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "user": {
                    "id": "550e8400-e29b-41d4-a716-446655440000",
                    "email": "alice@example.com",
                    "username": "alice",
                },
                "tokenType": "bearer",
                "expiresIn": 900,
            },
        },
    )


class TokenResponse(CamelModel):
    """Response schema for token refresh."""

    access_token: str
    token_type: str = Field(default="bearer")
    expires_in: int


class IdentityClaimsResponse(CamelModel):
    sub: UUID
    email: str
    username: str


class MeResponse(CamelModel):
    """Response schema for ``GET /me``."""

    user: IdentityClaimsResponse


class LogoutResponse(CamelModel):
    ok: bool = True
