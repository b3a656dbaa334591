"""FastAPI dependency injection for the Tunebox API.

Provides dependencies for:
- Settings and long-lived services (held on ``app.state``)
- A per-request auth store
- The authentication service
- Authentication (current identity from the bearer token)
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tunebox.application.services import AuthenticationService
from tunebox_auth import (
    AuthStore,
    AuthStoreProvider,
    Identity,
    JWTService,
    PasswordHashingService,
)
from tunebox_config.settings import Settings

logger = logging.getLogger(__name__)

# auto_error=False so a missing header yields our 401 body, not FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_api_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_jwt_service(request: Request) -> JWTService:
    return request.app.state.jwt_service


def get_password_service(request: Request) -> PasswordHashingService:
    return request.app.state.password_service


def get_store_provider(request: Request) -> AuthStoreProvider:
    return request.app.state.store_provider


SettingsDep = Annotated[Settings, Depends(get_api_settings)]


# -----------------------------------------------------------------------------
# Auth store (one unit of work per request)
# -----------------------------------------------------------------------------


async def get_auth_store(
    provider: Annotated[AuthStoreProvider, Depends(get_store_provider)],
) -> AsyncGenerator[AuthStore, None]:
    """
    Auth store dependency.

    Routers call ``commit()`` explicitly after a successful write.

    Yields
    ------
    AuthStore for the request
    """
    async with provider.session() as store:
        yield store


AuthStoreDep = Annotated[AuthStore, Depends(get_auth_store)]


# -----------------------------------------------------------------------------
# Services
# -----------------------------------------------------------------------------


def get_authentication_service(
    store: AuthStoreDep,
    settings: SettingsDep,
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
    password_service: Annotated[PasswordHashingService, Depends(get_password_service)],
) -> AuthenticationService:
    """
    Build the request-scoped authentication service.

    Registration, login, refresh and logout all go through it.
    """
    return AuthenticationService(
        identity_repository=store.identities,
        refresh_token_registry=store.refresh_tokens,
        password_service=password_service,
        jwt_service=jwt_service,
        rotate_refresh_tokens=settings.jwt_rotate_refresh_tokens,
    )


AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


# -----------------------------------------------------------------------------
# Bearer-authenticated identity
# -----------------------------------------------------------------------------


async def get_current_identity(
    auth_service: AuthService,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    """
    FastAPI dependency to get the current identity from the access token.

    A missing or malformed Authorization header, or a token that fails
    verification, raises InvalidTokenError (401). A valid token whose
    subject no longer exists raises IdentityNotFoundError (404).
    """
    token = credentials.credentials if credentials else None
    return await auth_service.get_identity(token)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
