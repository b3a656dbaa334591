"""Application services."""

from tunebox.application.services.authentication_service import AuthenticationService

__all__ = ["AuthenticationService"]
