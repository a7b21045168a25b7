"""
steamidler - keep a Steam account online and idling games.

Usage:
    >>> from steamidler import SteamIdler, IdlerConfig
    >>>
    >>> idler = SteamIdler(IdlerConfig.from_env())
    >>> await idler.run()
"""
import logging
from .client import SteamIdler

# Configuration
from .core.config import IdlerConfig, RetryConfig, KeepAliveConfig

# Credentials
from .core.credentials import (
    Credentials,
    CredentialStore,
    EnvironmentSecrets,
    FileTokenStorage,
    MemoryTokenStorage,
)

# Errors
from .core.exceptions import (
    IdlerException,
    ConfigurationError,
    InvalidSecretError,
    ChallengeRequiredError,
    TransientConnectionError,
    LoginRejectedError,
    RetryExhaustedError,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for steamidler modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'steamidler',
        'steamidler.client',
        'steamidler.credentials',
        'steamidler.login',
        'steamidler.session',
        'steamidler.retry',
        'steamidler.connection',
        'steamidler.keepalive',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'SteamIdler',
    'IdlerConfig',
    'RetryConfig',
    'KeepAliveConfig',
    'Credentials',
    'CredentialStore',
    'EnvironmentSecrets',
    'FileTokenStorage',
    'MemoryTokenStorage',
    'IdlerException',
    'ConfigurationError',
    'InvalidSecretError',
    'ChallengeRequiredError',
    'TransientConnectionError',
    'LoginRejectedError',
    'RetryExhaustedError',
    'setup_logging',
]
