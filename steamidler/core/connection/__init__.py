"""Steam network connection boundary."""
from .protocols import SteamConnection, ConnectionEvents


def create_steam_connection() -> SteamConnection:
    """Create the default connection (requires the 'steam' extra)."""
    from .steam_client import SteamUserConnection
    return SteamUserConnection()


__all__ = [
    'SteamConnection',
    'ConnectionEvents',
    'create_steam_connection',
]
