"""
In-memory token storage implementation.

Provides non-persistent storage for testing and throwaway runs.
"""
from typing import Optional

from .protocols import TokenStorage


class MemoryTokenStorage(TokenStorage):
    """
    In-memory token storage.

    Data is lost when the object is destroyed. Counts writes so callers can
    check how often the slot was overwritten.

    Example:
        >>> storage = MemoryTokenStorage()
        >>> await storage.write(b'sentry')
        >>> await storage.read()
        b'sentry'
    """

    def __init__(self, token: Optional[bytes] = None):
        self._token = token
        self.writes = 0

    async def read(self) -> Optional[bytes]:
        return self._token

    async def write(self, token: bytes) -> None:
        self._token = bytes(token)
        self.writes += 1

    def exists(self) -> bool:
        return self._token is not None
