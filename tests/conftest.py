"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/                  # Fast, isolated tests
    │   ├── tunebox_auth/      # Token, password and in-memory store tests
    │   ├── tunebox_config/    # Settings tests
    │   ├── application/       # AuthenticationService tests
    │   ├── client/            # Session client against mocked transports
    │   └── presentation/      # CLI tests
    └── integration/           # Tests across real components
        ├── api/               # HTTP endpoints via TestClient
        ├── persistence/       # SQLAlchemy store on in-memory SQLite
        └── client/            # Session client against the real app

Environment Variables:
    TUNEBOX_ENV_FILE     Optional .env file loaded before the tests run
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from tunebox_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load an explicit test env file when given (never the developer's .env)
_env_file = os.environ.get("TUNEBOX_ENV_FILE")
if _env_file and Path(_env_file).exists():
    load_dotenv(_env_file)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that exercise several real components together",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Make sure no cached settings leak between test sessions."""
    clear_settings_cache()
    yield
    clear_settings_cache()
