"""Client-side views of API payloads."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """Public projection of the logged-in user."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str
    username: str


class IdentityClaims(BaseModel):
    """Identity returned by ``GET /me``."""

    model_config = ConfigDict(frozen=True)

    sub: UUID
    email: str
    username: str

    def to_user(self) -> AuthUser:
        return AuthUser(id=self.sub, email=self.email, username=self.username)
