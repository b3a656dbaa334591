"""bcrypt password hashing.

bcrypt only looks at the first 72 bytes of its input. Longer passwords
are refused outright so that two passwords sharing a 72-byte prefix can
never verify against each other's hash.
"""

import logging

import bcrypt

from tunebox_auth.exceptions import WeakPasswordError

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72
_DUMMY_SECRET = b"tunebox-timing-equalizer"


def _encode(password: str) -> bytes:
    return password.encode("utf-8")


class PasswordHashingService:
    """Hash and check passwords with a fixed bcrypt work factor.

    Parameters
    ----------
    rounds
        bcrypt cost (log2 of the iteration count). 12 keeps a single
        check in the hundreds of milliseconds; tests use 4.
    min_length
        Smallest accepted password, in characters.

    Examples
    --------
    >>> service = PasswordHashingService(rounds=4)
    >>> stored = service.hash("hunter2")
    >>> service.verify("hunter2", stored)
    True
    """

    MAX_BYTES = BCRYPT_MAX_BYTES

    def __init__(self, rounds: int = 12, min_length: int = 1):
        self._rounds = rounds
        self._min_length = min_length
        self._dummy_hash: bytes | None = None

    @property
    def rounds(self) -> int:
        return self._rounds

    def validate_strength(self, password: str) -> None:
        """Refuse passwords that are empty, too short or too long to hash.

        Raises
        ------
        WeakPasswordError
        """
        if not password:
            raise WeakPasswordError("Password cannot be empty")
        if len(password) < self._min_length:
            raise WeakPasswordError(
                f"Password must be at least {self._min_length} characters",
            )
        if len(_encode(password)) > BCRYPT_MAX_BYTES:
            raise WeakPasswordError(
                f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes",
            )

    def hash(self, password: str) -> str:
        """Return a salted bcrypt hash (``$2b$<rounds>$...``) of the password."""
        self.validate_strength(password)
        digest = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self._rounds))
        return digest.decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash.

        A malformed hash or an unhashable password counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError) as e:
            logger.debug("Password check failed on unusable input: %s", e)
            return False

    def verify_dummy(self, password: str) -> bool:
        """Burn one bcrypt check when there is no account to check against.

        Keeps a failed login for an unknown email as slow as one with a
        wrong password. Always returns False.
        """
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(
                _DUMMY_SECRET,
                bcrypt.gensalt(rounds=self._rounds),
            )
        self.verify(password, self._dummy_hash.decode("ascii"))
        return False
