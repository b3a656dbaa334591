"""Access token caches for the session client."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class AccessTokenStore(ABC):
    """Where the client keeps the current access token."""

    @abstractmethod
    def get(self) -> str | None:
        """Return the cached token, or None."""

    @abstractmethod
    def set(self, token: str) -> None:
        """Replace the cached token."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the cached token."""


class MemoryTokenStore(AccessTokenStore):
    """Token cache that lives as long as the process."""

    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore(AccessTokenStore):
    """Token cache persisted as a small JSON document.

    Survives process restarts the way browser local storage survives
    page reloads. An unreadable or malformed file counts as empty.
    """

    KEY = "accessToken"

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> str | None:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self._path, e)
            return None
        token = data.get(self.KEY) if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def set(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({self.KEY: token}), encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
