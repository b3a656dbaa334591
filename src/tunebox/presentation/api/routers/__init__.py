"""API routers."""

from tunebox.presentation.api.routers.auth import router as auth_router
from tunebox.presentation.api.routers.me import router as me_router

__all__ = [
    "auth_router",
    "me_router",
]
