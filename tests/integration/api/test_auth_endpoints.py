"""Integration tests for authentication endpoints."""

from datetime import timedelta
from uuid import UUID, uuid4

from fastapi.testclient import TestClient


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_success(self, test_client: TestClient, jwt_service):
        """Test successful registration returns token, user and cookie."""
        response = test_client.post(
            "/auth/register",
            json={
                "email": "alice@example.com",
                "password": "secret",
                "username": "alice",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["expiresIn"] == 15 * 60
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["username"] == "alice"
        assert set(data["user"]) == {"id", "email", "username"}

        payload = jwt_service.verify_access_token(data["accessToken"])
        assert payload.user_id == UUID(data["user"]["id"])
        assert payload.username == "alice"

    def test_register_sets_http_only_refresh_cookie(self, test_client: TestClient):
        """Test the refresh cookie attributes."""
        response = test_client.post(
            "/auth/register",
            json={"email": "a@x.io", "password": "secret", "username": "alice"},
        )

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("refreshToken=")
        assert "HttpOnly" in set_cookie
        assert "Path=/auth/refresh" in set_cookie
        assert "SameSite=strict" in set_cookie
        assert f"Max-Age={7 * 24 * 60 * 60}" in set_cookie
        assert "refreshToken" not in response.json()

    def test_register_duplicate_email(
        self, test_client: TestClient, registered_user_data, registered_user
    ):
        """Test that registering the same email twice fails with 409."""
        response = test_client.post(
            "/auth/register",
            json={**registered_user_data, "username": "someone-else"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "EMAIL_ALREADY_EXISTS"

    def test_register_duplicate_username_different_case(
        self, test_client: TestClient, registered_user
    ):
        """Test that usernames collide case-insensitively."""
        response = test_client.post(
            "/auth/register",
            json={"email": "other@x.io", "password": "secret", "username": "ALICE"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "USERNAME_ALREADY_EXISTS"

    def test_register_missing_field(self, test_client: TestClient):
        """Test that a missing field is a 400 with the validation code."""
        response = test_client.post(
            "/auth/register",
            json={"email": "a@x.io", "password": "secret"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "detail": "email, password and username required",
            "code": "VALIDATION_ERROR",
        }

    def test_register_over_long_password(self, test_client: TestClient):
        """Test that a password beyond 72 bytes is rejected."""
        response = test_client.post(
            "/auth/register",
            json={"email": "a@x.io", "password": "p" * 73, "username": "alice"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "WEAK_PASSWORD"

    def test_register_malformed_body(self, test_client: TestClient):
        """Test that a body that is not JSON is a 400."""
        response = test_client.post(
            "/auth/register",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success(
        self, test_client: TestClient, registered_user_data, registered_user
    ):
        """Test successful login returns tokens and sets the cookie."""
        response = test_client.post(
            "/auth/login",
            json={
                "email": registered_user_data["email"],
                "password": registered_user_data["password"],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == registered_user["user"]["id"]
        assert data["accessToken"]
        assert "refreshToken" in response.cookies

    def test_wrong_password_matches_unknown_email(
        self, test_client: TestClient, registered_user_data, registered_user
    ):
        """Test that the two failure modes are indistinguishable."""
        wrong_password = test_client.post(
            "/auth/login",
            json={"email": registered_user_data["email"], "password": "nope"},
        )
        unknown_email = test_client.post(
            "/auth/login",
            json={"email": "ghost@x.io", "password": "secret"},
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["detail"] == "Invalid email or password"
        assert wrong_password.headers["www-authenticate"] == "Bearer"

    def test_login_missing_password(self, test_client: TestClient):
        """Test that a missing password is a 400."""
        response = test_client.post("/auth/login", json={"email": "a@x.io"})

        assert response.status_code == 400
        assert response.json()["detail"] == "email and password required"


class TestRefresh:
    """Tests for POST /auth/refresh."""

    def test_refresh_with_cookie(
        self, test_client: TestClient, registered_user, jwt_service
    ):
        """Test that the jar's cookie is exchanged for an access token."""
        response = test_client.post("/auth/refresh")

        assert response.status_code == 200
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["expiresIn"] == 15 * 60
        payload = jwt_service.verify_access_token(data["accessToken"])
        assert str(payload.user_id) == registered_user["user"]["id"]
        assert "set-cookie" not in response.headers

    def test_refresh_without_cookie(self, test_client: TestClient):
        """Test that a missing cookie is a 401."""
        response = test_client.post("/auth/refresh")

        assert response.status_code == 401
        assert response.json() == {
            "detail": "Invalid or expired refresh token",
            "code": "INVALID_TOKEN",
        }

    def test_refresh_with_expired_cookie(
        self, test_client: TestClient, registered_user, jwt_service
    ):
        """Test that an expired refresh token is rejected."""
        expired = jwt_service.create_refresh_token(
            UUID(registered_user["user"]["id"]),
            expires_delta=timedelta(seconds=-5),
        )

        response = test_client.post(
            "/auth/refresh",
            headers={"Cookie": f"refreshToken={expired}"},
        )

        assert response.status_code == 401

    def test_refresh_with_access_token_in_cookie(
        self, test_client: TestClient, registered_user
    ):
        """Test that an access token cannot stand in for a refresh token."""
        response = test_client.post(
            "/auth/refresh",
            headers={"Cookie": f"refreshToken={registered_user['accessToken']}"},
        )

        assert response.status_code == 401

    def test_stale_refresh_token_after_relogin(
        self, test_client: TestClient, registered_user_data, registered_user
    ):
        """Test that logging in again revokes the previous refresh token."""
        credentials = {
            "email": registered_user_data["email"],
            "password": registered_user_data["password"],
        }
        r1 = test_client.post("/auth/login", json=credentials).cookies["refreshToken"]

        first_refresh = test_client.post(
            "/auth/refresh",
            headers={"Cookie": f"refreshToken={r1}"},
        )
        assert first_refresh.status_code == 200
        assert first_refresh.json()["accessToken"]

        r2 = test_client.post("/auth/login", json=credentials).cookies["refreshToken"]
        assert r2 != r1

        stale = test_client.post(
            "/auth/refresh",
            headers={"Cookie": f"refreshToken={r1}"},
        )
        current = test_client.post(
            "/auth/refresh",
            headers={"Cookie": f"refreshToken={r2}"},
        )
        assert stale.status_code == 401
        assert current.status_code == 200


class TestLogout:
    """Tests for POST /auth/logout."""

    def test_logout_revokes_refresh_token(
        self, test_client: TestClient, registered_user
    ):
        """Test that logout clears the cookie and revokes the token."""
        token = registered_user["refreshToken"]

        response = test_client.post(
            "/auth/logout",
            headers={"Cookie": f"refreshToken={token}"},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith('refreshToken=""') or "Max-Age=0" in set_cookie
        assert "Path=/auth/refresh" in set_cookie

        refresh = test_client.post(
            "/auth/refresh",
            headers={"Cookie": f"refreshToken={token}"},
        )
        assert refresh.status_code == 401

    def test_logout_without_cookie(self, test_client: TestClient):
        """Test that logout without any cookie still succeeds."""
        response = test_client.post("/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_logout_with_garbage_cookie(self, test_client: TestClient):
        """Test that logout with an unusable cookie still succeeds."""
        response = test_client.post(
            "/auth/logout",
            headers={"Cookie": "refreshToken=garbage"},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_logout_with_expired_cookie(
        self, test_client: TestClient, registered_user, jwt_service
    ):
        """Test that an expired token is ignored and the current one survives."""
        expired = jwt_service.create_refresh_token(
            UUID(registered_user["user"]["id"]),
            expires_delta=timedelta(seconds=-5),
        )

        response = test_client.post(
            "/auth/logout",
            headers={"Cookie": f"refreshToken={expired}"},
        )
        refresh = test_client.post(
            "/auth/refresh",
            headers={"Cookie": f"refreshToken={registered_user['refreshToken']}"},
        )

        assert response.status_code == 200
        assert refresh.status_code == 200

    def test_logout_twice(self, test_client: TestClient, registered_user):
        """Test that logout is idempotent."""
        headers = {"Cookie": f"refreshToken={registered_user['refreshToken']}"}

        first = test_client.post("/auth/logout", headers=headers)
        second = test_client.post("/auth/logout", headers=headers)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json() == {"ok": True}


class TestMe:
    """Tests for GET /me."""

    def test_me_with_valid_token(
        self, test_client: TestClient, registered_user, auth_headers
    ):
        """Test that the current identity is returned."""
        response = test_client.get("/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "user": {
                "sub": registered_user["user"]["id"],
                "email": "a@x.io",
                "username": "alice",
            },
        }

    def test_me_without_token(self, test_client: TestClient):
        """Test that a missing Authorization header is a 401."""
        response = test_client.get("/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_me_with_malformed_header(self, test_client: TestClient):
        """Test that a non-bearer Authorization header is a 401."""
        response = test_client.get("/me", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401

    def test_me_with_expired_token(
        self, test_client: TestClient, registered_user, jwt_service
    ):
        """Test that an expired access token is a 401."""
        expired = jwt_service.create_access_token(
            UUID(registered_user["user"]["id"]),
            "a@x.io",
            "alice",
            expires_delta=timedelta(seconds=-5),
        )

        response = test_client.get(
            "/me",
            headers={"Authorization": f"Bearer {expired}"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"

    def test_me_with_refresh_token(self, test_client: TestClient, registered_user):
        """Test that a refresh token is not accepted as a bearer token."""
        response = test_client.get(
            "/me",
            headers={"Authorization": f"Bearer {registered_user['refreshToken']}"},
        )

        assert response.status_code == 401

    def test_me_for_unknown_identity(self, test_client: TestClient, jwt_service):
        """Test that a valid token for a missing identity is a 404."""
        token = jwt_service.create_access_token(uuid4(), "gone@x.io", "gone")

        response = test_client.get(
            "/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 404
        assert response.json()["code"] == "IDENTITY_NOT_FOUND"


class TestInfoEndpoints:
    """Tests for /health and /."""

    def test_health(self, test_client: TestClient):
        """Test the health check."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, test_client: TestClient):
        """Test the API root lists the endpoints."""
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["auth"] == "/auth"
