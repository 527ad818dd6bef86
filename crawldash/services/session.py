"""Authentication session shared by the API client and the controllers."""

import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

TOKEN_STORAGE_KEY = "authToken"


class Storage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class Session:
    """Holds the current bearer token and mirrors it to durable *storage*.

    The stored token is read once, at construction. There is no expiry
    timer: a stale token is only noticed when the backend rejects it and
    the API client calls :meth:`clear`.
    """

    def __init__(self, storage: Storage, key: str = TOKEN_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._token: Optional[str] = storage.get(key) or None
        if self._token:
            logger.debug("Session restored from storage")

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token
        self._storage.set(self._key, token)

    def clear(self) -> None:
        if self._token:
            logger.info("Session cleared")
        self._token = None
        self._storage.remove(self._key)

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)
