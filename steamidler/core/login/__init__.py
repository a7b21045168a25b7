"""Login option assembly."""
from .options import LoginAttemptOptions, LoginOptionBuilder

__all__ = [
    'LoginAttemptOptions',
    'LoginOptionBuilder',
]
