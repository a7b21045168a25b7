"""Steam Guard mobile authenticator codes."""
from .code_generator import SteamGuardCodeGenerator, CODE_INTERVAL, CODE_LENGTH

__all__ = [
    'SteamGuardCodeGenerator',
    'CODE_INTERVAL',
    'CODE_LENGTH',
]
