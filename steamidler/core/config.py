"""
Idler configuration module.

Settings that are not secrets: retry policy, keep-alive endpoint, token
location, the activity list and the presence state. Secrets (account name,
password, shared secret, continuation token) are read separately through
a SecretSource.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .enums import PersonaState, RATE_LIMIT_CODES
from .exceptions import ConfigurationError

DEFAULT_GAMES: Tuple[int, ...] = (
    730, 714010, 440, 3419430, 291550, 1938090, 1905180,
    1275350, 2021910, 1665460, 666220, 2281730, 578080,
)


@dataclass
class RetryConfig:
    """
    Retry configuration.

    Controls the backoff between login attempts.
    """
    max_retries: int = 6
    base_delay: float = 30.0  # seconds
    rate_limit_delay: float = 60.0  # seconds
    exponential_base: float = 2.0
    rate_limit_codes: Tuple[int, ...] = tuple(int(code) for code in RATE_LIMIT_CODES)
    fatal_codes: Tuple[int, ...] = ()  # codes that end the process instead of retrying

    def is_rate_limit(self, code: Optional[int]) -> bool:
        return code is not None and int(code) in self.rate_limit_codes

    def calculate_delay(self, attempt: int, code: Optional[int] = None) -> float:
        """Calculate delay in seconds before retry number `attempt` (1-based)."""
        base = self.rate_limit_delay if self.is_rate_limit(code) else self.base_delay
        return base * (self.exponential_base ** max(0, attempt - 1))


@dataclass
class KeepAliveConfig:
    """HTTP keep-alive endpoint for hosts that expect a listening port."""
    enabled: bool = False
    host: str = '0.0.0.0'
    port: int = 8080


@dataclass
class IdlerConfig:
    """
    Complete idler configuration.

    Centralizes all non-secret options.
    """
    token_path: Path = Path('sentry')
    games: Tuple[int, ...] = DEFAULT_GAMES
    persona_state: PersonaState = PersonaState.Invisible
    retry: RetryConfig = field(default_factory=RetryConfig)
    keepalive: KeepAliveConfig = field(default_factory=KeepAliveConfig)
    log_level: str = 'INFO'

    @classmethod
    def default(cls) -> 'IdlerConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'IdlerConfig':
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            IdlerConfig instance

        Raises:
            ConfigurationError: If a numeric setting cannot be parsed
        """
        env = os.environ if environ is None else environ

        config = cls()
        if env.get('SENTRY_PATH'):
            config.token_path = Path(env['SENTRY_PATH'])
        if env.get('GAMES'):
            config.games = parse_games(env['GAMES'])
        if env.get('MAX_RETRIES'):
            config.retry.max_retries = _parse_int('MAX_RETRIES', env['MAX_RETRIES'])
            if config.retry.max_retries < 1:
                raise ConfigurationError("MAX_RETRIES must be a positive integer")
        if env.get('LOG_LEVEL'):
            config.log_level = env['LOG_LEVEL']

        port = env.get('KEEPALIVE_PORT') or env.get('PORT')
        if port:
            config.keepalive.enabled = True
            config.keepalive.port = _parse_int('PORT', port)
        if env.get('KEEPALIVE_HOST'):
            config.keepalive.host = env['KEEPALIVE_HOST']

        return config


def parse_games(value: str) -> Tuple[int, ...]:
    """Parse a comma separated list of app ids."""
    games = tuple(
        _parse_int('GAMES', part)
        for part in value.replace(' ', '').split(',')
        if part
    )
    if not games:
        raise ConfigurationError("GAMES must list at least one app id")
    return games


def _parse_int(name: str, value: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
