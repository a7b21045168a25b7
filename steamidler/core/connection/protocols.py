"""
Connection protocols.

The Steam network protocol itself comes from an external library; the idler
only talks to it through this interface.
"""
from typing import Any, Callable, Optional, Protocol, Sequence, runtime_checkable

from ..enums import PersonaState
from ..login import LoginAttemptOptions


class ConnectionEvents:
    """Event names emitted by a SteamConnection."""

    # (domain: Optional[str], code_mismatch: bool) - Steam wants a Steam Guard code
    CHALLENGE = 'challenge'
    # (token: bytes) - Steam issued a new continuation token
    SENTRY = 'sentry'
    # () - logon accepted
    LOGGED_ON = 'logged_on'
    # (code: int) - logon refused or connection lost
    ERROR = 'error'

    ALL = (CHALLENGE, SENTRY, LOGGED_ON, ERROR)


@runtime_checkable
class SteamConnection(Protocol):
    """
    Protocol for an authenticated Steam session.

    Implementations report the outcome of log_on() through events rather
    than return values. log_on() itself only raises for failures that
    happen before a logon request reaches Steam.
    """

    @property
    def steam_id(self) -> Optional[str]:
        """SteamID of the logged on account, if any."""
        ...

    def on(self, event: str, callback: Callable) -> Any:
        """Register an event handler."""
        ...

    async def log_on(self, options: LoginAttemptOptions) -> None:
        """
        Start a logon.

        Raises:
            TransientConnectionError: If the request could not be sent
        """
        ...

    async def log_off(self) -> None:
        """Log off and drop the connection."""
        ...

    async def set_persona(self, state: PersonaState) -> None:
        """Change friends-list visibility."""
        ...

    async def games_played(self, app_ids: Sequence[int]) -> None:
        """Declare the apps the account is currently playing."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...
