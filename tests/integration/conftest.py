"""Shared fixtures for integration tests."""

import pytest
from pydantic import SecretStr

from tunebox_auth import JWTService
from tunebox_auth.persistence import InMemoryAuthStoreProvider
from tunebox_config.settings import Settings

TEST_ACCESS_SECRET = "test-access-secret-for-testing-only"
TEST_REFRESH_SECRET = "test-refresh-secret-for-testing-only"


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings with debug enabled."""
    return Settings(
        # Required security settings
        jwt_access_secret_key=SecretStr(TEST_ACCESS_SECRET),
        jwt_refresh_secret_key=SecretStr(TEST_REFRESH_SECRET),
        # API settings
        api_host="127.0.0.1",
        api_port=4000,
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        api_cookie_secure=False,
        # Fast hashing
        password_hash_rounds=4,
        storage_backend="memory",
    )


@pytest.fixture
def store_provider() -> InMemoryAuthStoreProvider:
    return InMemoryAuthStoreProvider()


@pytest.fixture
def jwt_service() -> JWTService:
    """Token service sharing the app's secrets, for crafting tokens."""
    return JWTService(
        access_secret=TEST_ACCESS_SECRET,
        refresh_secret=TEST_REFRESH_SECRET,
    )
