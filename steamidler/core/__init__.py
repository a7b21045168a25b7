"""Core components of the idler."""
from .config import IdlerConfig, RetryConfig, KeepAliveConfig, DEFAULT_GAMES
from .enums import EResult, PersonaState
from .exceptions import (
    IdlerException,
    ConfigurationError,
    InvalidSecretError,
    ChallengeRequiredError,
    TransientConnectionError,
    LoginRejectedError,
    RetryExhaustedError,
)

__all__ = [
    'IdlerConfig',
    'RetryConfig',
    'KeepAliveConfig',
    'DEFAULT_GAMES',
    'EResult',
    'PersonaState',
    'IdlerException',
    'ConfigurationError',
    'InvalidSecretError',
    'ChallengeRequiredError',
    'TransientConnectionError',
    'LoginRejectedError',
    'RetryExhaustedError',
]
