"""Async HTTP client that keeps a Tunebox session alive."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from tunebox.client.exceptions import (
    ApiError,
    NotAuthenticatedError,
    SessionClientError,
    SessionExpiredError,
)
from tunebox.client.models import AuthUser, IdentityClaims
from tunebox.client.single_flight import SingleFlight
from tunebox.client.token_store import AccessTokenStore, MemoryTokenStore

logger = logging.getLogger(__name__)

SessionListener = Callable[[AuthUser | None], None]


class SessionClient:
    """HTTP client wrapper for the Tunebox API.

    The access token is cached in an ``AccessTokenStore``; the refresh
    token only ever lives in the HTTP client's cookie jar. A 401 on a
    non-auth path triggers one shared refresh exchange no matter how many
    requests fail concurrently, after which each request that carried a
    bearer token is retried once with the new token.

    Parameters
    ----------
    base_url
        Root URL of the API, e.g. ``http://localhost:4000``.
    token_store
        Access token cache; in-memory by default.
    timeout
        Per-request timeout in seconds, the refresh exchange included.
    transport
        Optional httpx transport (``httpx.ASGITransport`` or
        ``httpx.MockTransport`` in tests).
    auth_prefix
        Requests under this path never trigger a refresh.
    refresh_cookie_name
        Name of the HttpOnly refresh cookie set by the server.
    """

    def __init__(
        self,
        base_url: str,
        token_store: AccessTokenStore | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        auth_prefix: str = "/auth/",
        refresh_cookie_name: str = "refreshToken",
    ):
        self._base_url = base_url.rstrip("/")
        self._token_store = token_store or MemoryTokenStore()
        self._timeout = timeout
        self._transport = transport
        self._auth_prefix = auth_prefix
        self._refresh_cookie_name = refresh_cookie_name
        self._client: httpx.AsyncClient | None = None
        self._refresh_flight: SingleFlight[str] = SingleFlight()
        self._current_user: AuthUser | None = None
        self._listeners: list[SessionListener] = []

    async def __aenter__(self) -> SessionClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    @property
    def access_token(self) -> str | None:
        return self._token_store.get()

    @property
    def current_user(self) -> AuthUser | None:
        return self._current_user

    @property
    def is_authenticated(self) -> bool:
        return self._token_store.get() is not None

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_flight.in_flight

    def add_listener(self, callback: SessionListener) -> Callable[[], None]:
        """Subscribe to session changes; returns an unsubscribe function."""
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    def _set_current_user(self, user: AuthUser | None) -> None:
        if user == self._current_user:
            return
        self._current_user = user
        for listener in list(self._listeners):
            try:
                listener(user)
            except Exception:
                logger.exception("Session listener failed")

    def _clear_session(self) -> None:
        self._token_store.clear()
        if self._client is not None:
            self._client.cookies.delete(self._refresh_cookie_name)
        self._set_current_user(None)

    # -------------------------------------------------------------------------
    # Request pipeline
    # -------------------------------------------------------------------------

    def _is_auth_path(self, path: str) -> bool:
        return ("/" + path.lstrip("/")).startswith(self._auth_prefix)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any = None,
        retry: bool = True,
    ) -> httpx.Response:
        """Send a request, refreshing the access token once on 401.

        Raises
        ------
        SessionExpiredError
            A 401 triggered a refresh and the refresh was rejected.
        ApiError
            The final response is not 2xx.
        """
        headers = dict(headers or {})
        client = self._get_client()
        response = await client.request(method, path, headers=headers, json=json)

        if (
            response.status_code == 401
            and retry
            and not self._is_auth_path(path)
        ):
            token = await self._refresh_or_expire()
            if token and _has_authorization(headers):
                logger.debug("Retrying %s %s with refreshed token", method, path)
                headers = {
                    k: v for k, v in headers.items() if k.lower() != "authorization"
                }
                headers["Authorization"] = f"Bearer {token}"
                return await self.request(
                    method, path, headers=headers, json=json, retry=False
                )

        if not response.is_success:
            raise _api_error(response)
        return response

    async def _refresh_or_expire(self) -> str:
        try:
            return await self._refresh_flight.run(self._exchange_refresh_token)
        except (SessionClientError, httpx.HTTPError) as e:
            logger.info("Session refresh failed: %s", e)
            self._token_store.clear()
            self._set_current_user(None)
            raise SessionExpiredError() from e

    async def _exchange_refresh_token(self) -> str:
        client = self._get_client()
        response = await client.post(f"{self._auth_prefix}refresh")
        if not response.is_success:
            raise _api_error(response)
        body = _json_body(response)
        token = body.get("accessToken") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise ApiError(
                response.status_code,
                detail="Refresh response carried no access token",
            )
        self._token_store.set(token)
        return token

    async def refresh_access_token(self) -> str:
        """Exchange the refresh cookie for a new access token.

        Concurrent callers share one exchange.
        """
        return await self._refresh_or_expire()

    # -------------------------------------------------------------------------
    # Auth operations
    # -------------------------------------------------------------------------

    async def _authenticate(self, endpoint: str, payload: dict) -> AuthUser:
        response = await self.request(
            "POST", f"{self._auth_prefix}{endpoint}", json=payload
        )
        data = response.json()
        self._token_store.set(data["accessToken"])
        user = AuthUser.model_validate(data["user"])
        self._set_current_user(user)
        return user

    async def register(self, email: str, password: str, username: str) -> AuthUser:
        return await self._authenticate(
            "register",
            {"email": email, "password": password, "username": username},
        )

    async def login(self, email: str, password: str) -> AuthUser:
        return await self._authenticate(
            "login",
            {"email": email, "password": password},
        )

    async def get_me(self, access_token: str | None = None) -> IdentityClaims:
        """Fetch the live identity behind the access token.

        Raises
        ------
        NotAuthenticatedError
            No token was given and none is cached.
        """
        token = access_token or self._token_store.get()
        if not token:
            raise NotAuthenticatedError()
        response = await self.request(
            "GET", "/me", headers={"Authorization": f"Bearer {token}"}
        )
        claims = IdentityClaims.model_validate(response.json()["user"])
        self._set_current_user(claims.to_user())
        return claims

    async def logout(self) -> bool:
        """End the session on the server and locally.

        Local state is cleared even when the request fails; transport
        errors propagate afterwards.
        """
        headers: dict[str, str] = {}
        client = self._get_client()
        # The jar scopes the cookie to the refresh path, so forward it here
        refresh_token = client.cookies.get(self._refresh_cookie_name)
        if refresh_token:
            headers["Cookie"] = f"{self._refresh_cookie_name}={refresh_token}"
        try:
            response = await client.post(
                f"{self._auth_prefix}logout", headers=headers
            )
        finally:
            self._clear_session()
        if not response.is_success:
            raise _api_error(response)
        return bool(response.json().get("ok", False))


def _has_authorization(headers: dict[str, str]) -> bool:
    return any(k.lower() == "authorization" for k in headers)


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _api_error(response: httpx.Response) -> ApiError:
    detail: str | None = None
    code: str | None = None
    body = _json_body(response)
    if isinstance(body, dict):
        detail = body.get("detail")
        code = body.get("code")
    if detail is None:
        detail = response.text[:200] or response.reason_phrase
    return ApiError(response.status_code, detail=detail, code=code)
