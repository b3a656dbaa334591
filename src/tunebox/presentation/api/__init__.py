"""HTTP API (FastAPI)."""

from tunebox.presentation.api.app import create_app

__all__ = ["create_app"]
