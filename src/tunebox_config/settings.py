"""Tunebox configuration.

Every field can be set through an environment variable of the same name
(upper case). Variables win over the first env file found among:

- the file named by ``TUNEBOX_ENV_FILE`` (absolute, or relative to the
  project root)
- ``config/.env.dev`` for local development
- ``config/.env`` for deployments
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import (
    Field,
    SecretStr,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE_VARIABLE = "TUNEBOX_ENV_FILE"
_ROOT_MARKERS = ("config", ".git", "pyproject.toml")


def _find_project_root() -> Path:
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return here.parents[1]


def get_config_dir() -> Path:
    """Directory holding the ``.env`` files."""
    return _find_project_root() / "config"


def _env_file_candidates() -> list[Path]:
    candidates = []
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        path = Path(explicit)
        if not path.is_absolute():
            path = _find_project_root() / path
        candidates.append(path)
    config_dir = get_config_dir()
    candidates += [config_dir / ".env.dev", config_dir / ".env"]
    return candidates


def _resolve_env_file() -> Path | None:
    return next((p for p in _env_file_candidates() if p.is_file()), None)


class Settings(BaseSettings):
    """Runtime configuration for the API, the CLI and the stores."""

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Token signing; both required, and they must differ
    jwt_access_secret_key: SecretStr
    jwt_refresh_secret_key: SecretStr

    app_name: str = "Tunebox"

    # HTTP server
    api_host: str = "0.0.0.0"  # NOQA: S104
    api_port: int = 4000
    api_debug: bool = Field(
        default=False,
        description="Expose the OpenAPI docs and error details",
    )
    api_cors_origins: str = Field(
        default="",
        description="Comma separated origins allowed to send credentials",
    )

    # Refresh cookie; Secure ones are never sent over plain http://
    api_cookie_secure: bool = False
    api_cookie_samesite: Literal["lax", "strict", "none"] = "strict"
    api_cookie_domain: str | None = None
    refresh_cookie_name: str = "refreshToken"
    refresh_cookie_path: str = "/auth/refresh"

    # Token lifetimes
    jwt_access_token_expire_minutes: int = Field(default=15, gt=0)
    jwt_refresh_token_expire_days: int = Field(default=7, gt=0)
    jwt_rotate_refresh_tokens: bool = False

    # bcrypt work factor; 4 is the library minimum
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    storage_backend: Literal["memory", "sqlalchemy"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./data/tunebox.db"

    log_level: str = "INFO"

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _join_origin_list(cls, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return ",".join(value)
        return str(value) if value else ""

    @model_validator(mode="after")
    def _secrets_differ(self) -> Settings:
        if (
            self.jwt_access_secret_key.get_secret_value()
            == self.jwt_refresh_secret_key.get_secret_value()
        ):
            msg = "JWT_ACCESS_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ"
            raise ValueError(msg)
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.api_cors_origins.split(",")
            if origin.strip()
        ]

    @property
    def access_token_expire_seconds(self) -> int:
        return self.jwt_access_token_expire_minutes * 60

    @property
    def refresh_token_expire_seconds(self) -> int:
        return self.jwt_refresh_token_expire_days * 86400


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once.

    Raises a pydantic ``ValidationError`` when the signing secrets are
    missing from both the environment and the env file.
    """
    return Settings()  # type: ignore[call-arg]


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
