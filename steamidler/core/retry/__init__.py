"""Login retry with exponential backoff."""
from .retry_strategy import RetryStrategy, SteamBackoffStrategy
from .scheduler import RetryScheduler, RetryState

__all__ = [
    'RetryStrategy',
    'SteamBackoffStrategy',
    'RetryScheduler',
    'RetryState',
]
