"""Unit tests for Settings."""

import pytest
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from tunebox_config.settings import Settings


def _settings(**overrides) -> Settings:
    return Settings(
        jwt_access_secret_key=SecretStr("access"),
        jwt_refresh_secret_key=SecretStr("refresh"),
        **overrides,
    )


class TestSettingsDefaults:
    """Tests for the default configuration."""

    def test_token_and_cookie_defaults(self):
        """Test the session defaults."""
        settings = _settings()

        assert settings.jwt_access_token_expire_minutes == 15
        assert settings.jwt_refresh_token_expire_days == 7
        assert settings.jwt_rotate_refresh_tokens is False
        assert settings.refresh_cookie_name == "refreshToken"
        assert settings.refresh_cookie_path == "/auth/refresh"
        assert settings.api_cookie_secure is False
        assert settings.api_cookie_samesite == "strict"
        assert settings.storage_backend == "memory"
        assert settings.api_port == 4000

    def test_expiry_seconds(self):
        """Test the derived lifetimes used for cookies and responses."""
        settings = _settings()

        assert settings.access_token_expire_seconds == 900
        assert settings.refresh_token_expire_seconds == 604800

    def test_secrets_are_masked(self):
        """Test that secrets never appear in the repr."""
        assert "access" not in repr(_settings().jwt_access_secret_key)


class TestSettingsParsing:
    """Tests for value parsing."""

    def test_cors_origins_split(self):
        """Test that comma separated origins become a list."""
        settings = _settings(api_cors_origins="http://a.test, http://b.test,")

        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_cors_origins_from_list(self):
        """Test that a list is accepted too."""
        settings = _settings(api_cors_origins=["http://a.test", "http://b.test"])

        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_environment_variables(self, monkeypatch):
        """Test that values are read from the environment."""
        monkeypatch.setenv("JWT_ACCESS_SECRET_KEY", "env-access")
        monkeypatch.setenv("JWT_REFRESH_SECRET_KEY", "env-refresh")
        monkeypatch.setenv("JWT_ROTATE_REFRESH_TOKENS", "true")
        monkeypatch.setenv("STORAGE_BACKEND", "sqlalchemy")

        settings = Settings(_env_file=None)

        assert settings.jwt_access_secret_key.get_secret_value() == "env-access"
        assert settings.jwt_rotate_refresh_tokens is True
        assert settings.storage_backend == "sqlalchemy"

    def test_unknown_storage_backend_rejected(self):
        """Test that only supported backends are accepted."""
        with pytest.raises(PydanticValidationError):
            _settings(storage_backend="redis")

    def test_identical_secrets_rejected(self):
        """Test that one secret cannot sign both token kinds."""
        with pytest.raises(PydanticValidationError, match="must differ"):
            Settings(
                jwt_access_secret_key=SecretStr("same"),
                jwt_refresh_secret_key=SecretStr("same"),
            )

    def test_hash_rounds_bounds(self):
        """Test that the bcrypt work factor stays within the library range."""
        with pytest.raises(PydanticValidationError):
            _settings(password_hash_rounds=3)

    def test_only_api_debug_toggles_debugging(self, monkeypatch):
        """Test that a bare DEBUG variable is ignored in favour of API_DEBUG."""
        monkeypatch.setenv("JWT_ACCESS_SECRET_KEY", "env-access")
        monkeypatch.setenv("JWT_REFRESH_SECRET_KEY", "env-refresh")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.delenv("API_DEBUG", raising=False)

        settings = Settings(_env_file=None)

        assert "debug" not in settings.model_dump()
        assert settings.api_debug is False
