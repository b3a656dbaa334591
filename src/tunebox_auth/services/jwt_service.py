"""JWT token service.

Provides JWT token creation and verification for authentication.
Access and refresh tokens are signed with separate secrets so that one
kind can never be verified as the other.
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import jwt

from tunebox_auth.exceptions import InvalidTokenError
from tunebox_auth.schemas import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenPayload

logger = logging.getLogger(__name__)


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived, carry identity claims) and refresh
    tokens (long-lived, carry only the subject).

    Examples
    --------
    >>> service = JWTService(access_secret="a-secret", refresh_secret="r-secret")
    >>> token = service.create_access_token(user_id, "user@example.com", "alice")
    >>> payload = service.verify_access_token(token)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        access_secret
            Secret key for signing access tokens. Must be kept secure.
        refresh_secret
            Secret key for signing refresh tokens. Must differ from
            the access secret.
        access_token_expire_minutes
            Minutes until access token expires (default 15)
        refresh_token_expire_days
            Days until refresh token expires (default 7)
        """
        if not access_secret or not refresh_secret:
            msg = "JWT secret keys cannot be empty"
            raise ValueError(msg)
        if access_secret == refresh_secret:
            msg = "Access and refresh secret keys must differ"
            raise ValueError(msg)

        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_expire = timedelta(minutes=access_token_expire_minutes)
        self._refresh_expire = timedelta(days=refresh_token_expire_days)

    @property
    def access_token_lifetime(self) -> timedelta:
        return self._access_expire

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return self._refresh_expire

    def create_access_token(
        self,
        user_id: UUID,
        email: str,
        username: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token.

        Parameters
        ----------
        user_id
            The identity's unique identifier
        email
            The identity's email address
        username
            The identity's username
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(
            claims={"sub": str(user_id), "email": email, "username": username},
            token_type=ACCESS_TOKEN_TYPE,
            secret=self._access_secret,
            expires_delta=expires_delta or self._access_expire,
        )

    def create_refresh_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived refresh token.

        Refresh tokens only carry the subject. Every call yields a distinct
        token, even within the same second.
        """
        return self._create_token(
            claims={"sub": str(user_id)},
            token_type=REFRESH_TOKEN_TYPE,
            secret=self._refresh_secret,
            expires_delta=expires_delta or self._refresh_expire,
        )

    def verify_access_token(self, token: str) -> TokenPayload:
        """Verify and decode an access token.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, malformed or not an access token
        """
        return self._verify(token, self._access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        """Verify and decode a refresh token.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, malformed or not a refresh token
        """
        return self._verify(token, self._refresh_secret, REFRESH_TOKEN_TYPE)

    def _verify(self, token: str, secret: str, expected_type: str) -> TokenPayload:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "exp", "type"]},
            )

            token_type = payload["type"]
            if token_type != expected_type:
                msg = f"expected {expected_type} token, got {token_type}"
                raise ValueError(msg)

            return TokenPayload(
                user_id=UUID(payload["sub"]),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                token_type=token_type,
                email=payload.get("email"),
                username=payload.get("username"),
                jti=payload.get("jti"),
            )

        except jwt.ExpiredSignatureError as e:
            reason = "expired"
            cause: Exception = e
        except jwt.InvalidTokenError as e:
            reason = f"invalid: {e}"
            cause = e
        except (KeyError, ValueError, TypeError) as e:
            reason = f"malformed payload: {e}"
            cause = e

        logger.debug("Rejected %s token (%s)", expected_type, reason)
        raise InvalidTokenError(details={"reason": reason}) from cause

    def _create_token(
        self,
        claims: dict,
        token_type: str,
        secret: str,
        expires_delta: timedelta,
    ) -> str:
        now = datetime.now(tz=timezone.utc)

        payload = {
            **claims,
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
            "jti": uuid4().hex,
        }

        return jwt.encode(payload, secret, algorithm=self.ALGORITHM)
