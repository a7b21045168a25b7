"""
Credential source and token storage protocols.

Defines the interfaces the credential store depends on.
"""
from typing import Protocol, Optional, runtime_checkable


@runtime_checkable
class SecretSource(Protocol):
    """
    Protocol for reading named configuration values.

    Implementations can read from the environment, a vault, or a dict.
    """

    def get(self, name: str) -> Optional[str]:
        """
        Read a value.

        Args:
            name: Setting name (e.g. 'USERNAME')

        Returns:
            The value, or None if unset or empty
        """
        ...


@runtime_checkable
class TokenStorage(Protocol):
    """
    Protocol for the durable continuation-token slot.

    A single named slot holding raw bytes; writes overwrite.
    """

    async def read(self) -> Optional[bytes]:
        """
        Read the stored token.

        Returns:
            Token bytes if present, None otherwise
        """
        ...

    async def write(self, token: bytes) -> None:
        """
        Store the token, replacing any previous value.

        Args:
            token: Raw token bytes
        """
        ...

    def exists(self) -> bool:
        """
        Check if a token is stored.

        Returns:
            True if the slot holds a token
        """
        ...
