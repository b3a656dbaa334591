"""Authentication endpoints backed by the SQLAlchemy store."""

import pytest
from fastapi.testclient import TestClient

from tunebox.presentation.api.app import create_app
from tunebox_auth.persistence import SQLAlchemyAuthStoreProvider


@pytest.fixture
def sql_client(api_settings, tmp_path):
    """Test client using a throwaway SQLite file selected via settings."""
    settings = api_settings.model_copy(
        update={
            "storage_backend": "sqlalchemy",
            "database_url": f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}",
        },
    )
    app = create_app(settings=settings)
    assert isinstance(app.state.store_provider, SQLAlchemyAuthStoreProvider)
    # Entering the client runs the lifespan, which creates the tables
    with TestClient(app) as client:
        yield client


@pytest.mark.integration
class TestSQLAlchemyBackend:
    """Session lifecycle against a database."""

    def test_register_login_refresh_logout(self, sql_client: TestClient):
        """Test the full session lifecycle persists across requests."""
        user = {"email": "a@x.io", "password": "secret", "username": "alice"}
        credentials = {"email": user["email"], "password": user["password"]}

        assert sql_client.post("/auth/register", json=user).status_code == 201
        r1 = sql_client.post("/auth/login", json=credentials).cookies["refreshToken"]
        r2 = sql_client.post("/auth/login", json=credentials).cookies["refreshToken"]

        stale = sql_client.post(
            "/auth/refresh", headers={"Cookie": f"refreshToken={r1}"}
        )
        fresh = sql_client.post(
            "/auth/refresh", headers={"Cookie": f"refreshToken={r2}"}
        )
        assert stale.status_code == 401
        assert fresh.status_code == 200

        me = sql_client.get(
            "/me",
            headers={"Authorization": f"Bearer {fresh.json()['accessToken']}"},
        )
        assert me.json()["user"]["username"] == "alice"

        logout = sql_client.post(
            "/auth/logout", headers={"Cookie": f"refreshToken={r2}"}
        )
        assert logout.json() == {"ok": True}
        after = sql_client.post(
            "/auth/refresh", headers={"Cookie": f"refreshToken={r2}"}
        )
        assert after.status_code == 401

    def test_uniqueness_is_enforced(self, sql_client: TestClient):
        """Test email and case-insensitive username conflicts."""
        sql_client.post(
            "/auth/register",
            json={"email": "a@x.io", "password": "secret", "username": "Dave"},
        )

        same_email = sql_client.post(
            "/auth/register",
            json={"email": "a@x.io", "password": "secret", "username": "other"},
        )
        same_username = sql_client.post(
            "/auth/register",
            json={"email": "b@x.io", "password": "secret", "username": "dave"},
        )

        assert same_email.status_code == 409
        assert same_username.status_code == 409


class TestRefreshRotation:
    """Opt-in refresh token rotation."""

    @pytest.fixture
    def rotating_client(self, api_settings, store_provider):
        settings = api_settings.model_copy(update={"jwt_rotate_refresh_tokens": True})
        app = create_app(settings=settings, store_provider=store_provider)
        with TestClient(app) as client:
            yield client

    def test_refresh_rotates_cookie(self, rotating_client: TestClient):
        """Test that each refresh replaces the cookie and revokes the old one."""
        register = rotating_client.post(
            "/auth/register",
            json={"email": "a@x.io", "password": "secret", "username": "alice"},
        )
        original = register.cookies["refreshToken"]

        refreshed = rotating_client.post(
            "/auth/refresh", headers={"Cookie": f"refreshToken={original}"}
        )
        assert refreshed.status_code == 200
        rotated = refreshed.cookies["refreshToken"]
        assert rotated != original

        reuse = rotating_client.post(
            "/auth/refresh", headers={"Cookie": f"refreshToken={original}"}
        )
        assert reuse.status_code == 401
