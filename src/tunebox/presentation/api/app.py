"""Builds the Tunebox HTTP API.

``create_app`` wires settings, token and password services and the auth
store onto ``app.state``; routes read them back through the dependencies
module. uvicorn runs it in factory mode::

    uvicorn tunebox.presentation.api.app:create_app --factory
"""

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tunebox import __version__
from tunebox.presentation.api.exception_handlers import setup_exception_handlers
from tunebox.presentation.api.routers import auth_router, me_router
from tunebox_auth import AuthStoreProvider, JWTService, PasswordHashingService
from tunebox_auth.persistence import (
    InMemoryAuthStoreProvider,
    SQLAlchemyAuthStoreProvider,
)
from tunebox_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

API_VERSION = __version__

_OWN_LOGGERS = ("tunebox", "tunebox_auth")
_CHATTY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite")

ENDPOINTS = {"health": "/health", "auth": "/auth", "me": "/me"}

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Registration, login and session management.

**Tokens:**
- Access token (15 minutes) returned in the body, sent as `Authorization: Bearer`
- Refresh token (7 days) set as an HttpOnly cookie scoped to `/auth/refresh`

**Revocation:**
- Only the most recently issued refresh token of a user is valid
- Logout removes it
""",
    },
    {"name": "Identity", "description": "The authenticated user."},
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Info", "description": "Service name, version and entry points."},
]


@lru_cache(maxsize=1)
def _configure_logging(log_level_str: str) -> None:
    """Send log records to stdout, once per process.

    Our own loggers follow ``LOG_LEVEL``; HTTP and database libraries are
    held at WARNING.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in _OWN_LOGGERS:
        logging.getLogger(name).setLevel(log_level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def build_store_provider(settings: Settings) -> AuthStoreProvider:
    """Pick the auth store named by ``STORAGE_BACKEND``."""
    if settings.storage_backend == "sqlalchemy":
        return SQLAlchemyAuthStoreProvider(database_url=settings.database_url)
    return InMemoryAuthStoreProvider()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    provider: AuthStoreProvider = app.state.store_provider
    await provider.initialize()
    logger.info("Tunebox API %s ready", API_VERSION)
    try:
        yield
    finally:
        await provider.close()
        logger.info("Tunebox API stopped")


def create_app(
    settings: Settings | None = None,
    store_provider: AuthStoreProvider | None = None,
) -> FastAPI:
    """Assemble the application.

    Parameters
    ----------
    settings
        Defaults to the process-wide ``get_settings()``.
    store_provider
        Defaults to the backend chosen by ``settings.storage_backend``.
    """
    settings = settings or get_settings()
    _configure_logging(settings.log_level)

    docs_enabled = settings.api_debug
    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Authentication service for the Tunebox music player.",
        version=API_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    app.state.settings = settings
    app.state.jwt_service = JWTService(
        access_secret=settings.jwt_access_secret_key.get_secret_value(),
        refresh_secret=settings.jwt_refresh_secret_key.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )
    app.state.password_service = PasswordHashingService(
        rounds=settings.password_hash_rounds,
    )
    app.state.store_provider = store_provider or build_store_provider(settings)

    # The web client sends the refresh cookie cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    setup_exception_handlers(app)

    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    app.include_router(me_router, tags=["Identity"])

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        return {"status": "healthy", "version": API_VERSION}

    @app.get("/", tags=["Info"])
    async def root() -> dict:
        return {
            "name": app.title,
            "version": API_VERSION,
            "docs": app.docs_url,
            "endpoints": ENDPOINTS,
        }

    return app
