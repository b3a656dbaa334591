"""``/auth`` endpoints: register, login, refresh and logout.

Access tokens travel in response bodies. Refresh tokens travel only in an
HttpOnly cookie scoped to the refresh path, so browser JavaScript never
sees them and other endpoints never receive them.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status

from tunebox.presentation.api.dependencies import (
    AuthService,
    AuthStoreDep,
    SettingsDep,
)
from tunebox.presentation.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from tunebox_auth import Identity
from tunebox_config.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _cookie_scope(settings: Settings) -> dict[str, Any]:
    # set_cookie and delete_cookie must agree on these or browsers keep both
    return {
        "key": settings.refresh_cookie_name,
        "path": settings.refresh_cookie_path,
        "domain": settings.api_cookie_domain,
        "secure": settings.api_cookie_secure,
        "httponly": True,
        "samesite": settings.api_cookie_samesite,
    }


def _store_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        value=token,
        max_age=settings.refresh_token_expire_seconds,
        **_cookie_scope(settings),
    )


def _drop_refresh_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(**_cookie_scope(settings))


def _session_body(
    identity: Identity,
    access_token: str,
    settings: Settings,
) -> AuthResponse:
    return AuthResponse(
        access_token=access_token,
        user=UserResponse.model_validate(identity),
        expires_in=settings.access_token_expire_seconds,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Create an account and start a session",
    responses={
        201: {"description": "Account created; refresh cookie set"},
        400: {"description": "Body incomplete or password unusable"},
        409: {"description": "Email or username taken"},
    },
)
async def register(
    request: RegisterRequest,
    response: Response,
    auth_service: AuthService,
    store: AuthStoreDep,
    settings: SettingsDep,
) -> AuthResponse:
    """Create an identity and sign it in straight away."""
    identity, access_token, refresh_token = await auth_service.register(
        email=request.email,
        password=request.password,
        username=request.username,
    )
    await store.commit()

    _store_refresh_cookie(response, refresh_token, settings)
    return _session_body(identity, access_token, settings)


@router.post(
    "/login",
    summary="Start a session with email and password",
    responses={
        200: {"description": "Signed in; refresh cookie set"},
        400: {"description": "Body incomplete"},
        401: {"description": "Wrong email or password"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService,
    store: AuthStoreDep,
    settings: SettingsDep,
) -> AuthResponse:
    """Sign in.

    The new refresh cookie replaces whatever refresh token the identity
    held before, so older sessions can no longer refresh.
    """
    identity, access_token, refresh_token = await auth_service.login(
        email=request.email,
        password=request.password,
    )
    await store.commit()

    _store_refresh_cookie(response, refresh_token, settings)
    return _session_body(identity, access_token, settings)


@router.post(
    "/refresh",
    summary="Trade the refresh cookie for a new access token",
    responses={
        200: {"description": "New access token issued"},
        401: {"description": "Cookie absent, malformed, expired or superseded"},
        404: {"description": "Identity was deleted"},
    },
)
async def refresh_token(
    request: Request,
    response: Response,
    auth_service: AuthService,
    store: AuthStoreDep,
    settings: SettingsDep,
) -> TokenResponse:
    cookie = request.cookies.get(settings.refresh_cookie_name)
    access_token, replacement = await auth_service.refresh(cookie)

    # Only set when JWT_ROTATE_REFRESH_TOKENS is on
    if replacement is not None:
        await store.commit()
        _store_refresh_cookie(response, replacement, settings)

    return TokenResponse(
        access_token=access_token,
        expires_in=settings.access_token_expire_seconds,
    )


@router.post(
    "/logout",
    summary="End the session",
    responses={200: {"description": "Always returned, with or without a session"}},
)
async def logout(
    request: Request,
    response: Response,
    auth_service: AuthService,
    store: AuthStoreDep,
    settings: SettingsDep,
) -> LogoutResponse:
    """Revoke the cookie's refresh token when it verifies, then expire the cookie."""
    cookie = request.cookies.get(settings.refresh_cookie_name)

    try:
        await auth_service.logout(cookie)
        await store.commit()
    except Exception:
        logger.warning("Could not revoke refresh token on logout", exc_info=True)
        await store.rollback()

    _drop_refresh_cookie(response, settings)
    return LogoutResponse(ok=True)
