"""
File token storage implementation.

Keeps the continuation token as raw bytes in a single file, the same layout
the sentry files of other Steam clients use.
"""
from pathlib import Path
from typing import Optional, Union

import aiofiles

from .protocols import TokenStorage
from ..logging import get_logger


class FileTokenStorage(TokenStorage):
    """
    File-based token storage.

    Writes go straight to the target path (last writer wins).

    Example:
        >>> storage = FileTokenStorage("sentry")
        >>> await storage.write(sentry_bytes)
        >>> storage.exists()
        True
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize file token storage.

        Args:
            path: Location of the token file
        """
        self._path = Path(path)
        self._logger = get_logger('steamidler.credentials')

    @property
    def path(self) -> Path:
        """Get token file path."""
        return self._path

    async def read(self) -> Optional[bytes]:
        if not self.exists():
            return None
        async with aiofiles.open(self._path, 'rb') as f:
            return await f.read()

    async def write(self, token: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self._path, 'wb') as f:
            await f.write(token)
        self._logger.debug(f"Wrote {len(token)} bytes to {self._path}")

    def exists(self) -> bool:
        return self._path.is_file()

    def __repr__(self) -> str:
        return f"FileTokenStorage({str(self._path)!r})"
