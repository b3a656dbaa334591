"""Authentication service for registration, login and token management."""

from __future__ import annotations

import asyncio
import hmac
import logging
from uuid import uuid4

from tunebox_auth import (
    EmailAlreadyExistsError,
    Identity,
    IdentityNotFoundError,
    IdentityRepository,
    InvalidCredentialsError,
    InvalidTokenError,
    JWTService,
    PasswordHashingService,
    RefreshTokenRegistry,
    UsernameAlreadyExistsError,
    ValidationError,
)

logger = logging.getLogger(__name__)

REFRESH_TOKEN_REJECTED = "Invalid or expired refresh token"


class AuthenticationService:
    """
    Application service for identity authentication.

    Orchestrates tunebox_auth infrastructure (password hashing, JWT tokens,
    identity store, refresh token registry) to provide:
    - Registration
    - Login with password
    - Access token refresh
    - Logout (refresh token revocation)
    - Identity lookup from an access token

    Issuing a refresh token always overwrites the registry entry of its
    identity, which revokes whatever refresh token was issued before.
    """

    def __init__(
        self,
        identity_repository: IdentityRepository,
        refresh_token_registry: RefreshTokenRegistry,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        rotate_refresh_tokens: bool = False,
    ):
        self._identity_repo = identity_repository
        self._refresh_registry = refresh_token_registry
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._rotate_refresh_tokens = rotate_refresh_tokens

    def _create_access_token(self, identity: Identity) -> str:
        return self._jwt_service.create_access_token(
            user_id=identity.id,
            email=identity.email,
            username=identity.username,
        )

    async def _issue_token_pair(self, identity: Identity) -> tuple[str, str]:
        access_token = self._create_access_token(identity)
        refresh_token = self._jwt_service.create_refresh_token(user_id=identity.id)
        await self._refresh_registry.put(identity.id, refresh_token)
        return access_token, refresh_token

    async def register(
        self,
        email: str | None,
        password: str | None,
        username: str | None,
    ) -> tuple[Identity, str, str]:
        if not _present(email) or not password or not _present(username):
            msg = "email, password and username required"
            raise ValidationError(msg)
        email = email.strip()
        username = username.strip()

        # Fail fast before hashing; add() re-checks atomically
        if await self._identity_repo.find_by_email(email) is not None:
            raise EmailAlreadyExistsError(email)
        if await self._identity_repo.find_by_username(username) is not None:
            raise UsernameAlreadyExistsError(username)

        # Hashing is slow on purpose; keep it off the event loop
        password_hash = await asyncio.to_thread(self._password_service.hash, password)

        identity = Identity(
            id=uuid4(),
            email=email,
            username=username,
            password_hash=password_hash,
        )
        await self._identity_repo.add(identity)

        access_token, refresh_token = await self._issue_token_pair(identity)

        logger.info("Identity registered: %s (%s)", identity.username, identity.id)
        return identity, access_token, refresh_token

    async def login(
        self,
        email: str | None,
        password: str | None,
    ) -> tuple[Identity, str, str]:
        if not _present(email) or not password:
            msg = "email and password required"
            raise ValidationError(msg)

        identity = await self._identity_repo.find_by_email(email.strip())
        if identity is None:
            await asyncio.to_thread(self._password_service.verify_dummy, password)
            raise InvalidCredentialsError(details={"reason": "unknown email"})

        matches = await asyncio.to_thread(
            self._password_service.verify,
            password,
            identity.password_hash,
        )
        if not matches:
            raise InvalidCredentialsError(details={"reason": "password mismatch"})

        access_token, refresh_token = await self._issue_token_pair(identity)

        logger.info("Identity logged in: %s", identity.id)
        return identity, access_token, refresh_token

    async def refresh(self, refresh_token: str | None) -> tuple[str, str | None]:
        """Exchange a refresh token for a new access token.

        Returns
        -------
        The new access token, and the new refresh token when rotation is
        enabled (None otherwise)
        """
        if not refresh_token:
            raise InvalidTokenError(
                REFRESH_TOKEN_REJECTED,
                details={"reason": "no refresh token"},
            )

        try:
            payload = self._jwt_service.verify_refresh_token(refresh_token)
        except InvalidTokenError as e:
            raise InvalidTokenError(REFRESH_TOKEN_REJECTED, details=e.details) from e

        stored = await self._refresh_registry.get(payload.user_id)
        if stored is None or not hmac.compare_digest(
            stored.encode("utf-8"),
            refresh_token.encode("utf-8"),
        ):
            raise InvalidTokenError(
                REFRESH_TOKEN_REJECTED,
                details={"reason": "revoked", "user_id": str(payload.user_id)},
            )

        # Claims come from the live record, not from the old token
        identity = await self._identity_repo.find_by_id(payload.user_id)
        if identity is None:
            raise IdentityNotFoundError(payload.user_id)

        access_token = self._create_access_token(identity)

        new_refresh_token = None
        if self._rotate_refresh_tokens:
            new_refresh_token = self._jwt_service.create_refresh_token(
                user_id=identity.id,
            )
            await self._refresh_registry.put(identity.id, new_refresh_token)

        logger.debug("Access token refreshed for identity: %s", identity.id)
        return access_token, new_refresh_token

    async def logout(self, refresh_token: str | None) -> None:
        """Revoke the refresh token's registry entry. Never raises."""
        if not refresh_token:
            return

        try:
            payload = self._jwt_service.verify_refresh_token(refresh_token)
        except InvalidTokenError as e:
            logger.debug("Ignoring unusable refresh token on logout: %s", e.details)
            return

        removed = await self._refresh_registry.delete(payload.user_id)
        logger.debug(
            "Logout for identity %s (registry entry removed: %s)",
            payload.user_id,
            removed,
        )

    async def get_identity(self, access_token: str | None) -> Identity:
        if not access_token:
            raise InvalidTokenError(details={"reason": "no access token"})

        payload = self._jwt_service.verify_access_token(access_token)

        identity = await self._identity_repo.find_by_id(payload.user_id)
        if identity is None:
            raise IdentityNotFoundError(payload.user_id)
        return identity


def _present(value: str | None) -> bool:
    return isinstance(value, str) and bool(value.strip())
