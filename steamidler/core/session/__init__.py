"""Steam session lifecycle."""
from .controller import SessionController, SessionState

__all__ = [
    'SessionController',
    'SessionState',
]
