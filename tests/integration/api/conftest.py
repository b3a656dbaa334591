"""Pytest fixtures for API integration tests."""

import pytest
from fastapi.testclient import TestClient

from tunebox.presentation.api.app import create_app


@pytest.fixture
def test_client(api_settings, store_provider):
    """Create a test client with a fresh in-memory store."""
    app = create_app(settings=api_settings, store_provider=store_provider)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def registered_user_data() -> dict:
    """Test user registration data."""
    return {
        "email": "a@x.io",
        "password": "secret",
        "username": "alice",
    }


@pytest.fixture
def registered_user(test_client, registered_user_data) -> dict:
    """Register a user and return the response body plus its refresh token."""
    response = test_client.post("/auth/register", json=registered_user_data)
    assert response.status_code == 201
    body = response.json()
    body["refreshToken"] = response.cookies["refreshToken"]
    return body


@pytest.fixture
def auth_headers(registered_user) -> dict:
    """Get auth headers for a registered user."""
    return {"Authorization": f"Bearer {registered_user['accessToken']}"}
