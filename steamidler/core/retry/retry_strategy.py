"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from ..config import RetryConfig


class RetryStrategy(ABC):
    """Abstract retry strategy."""

    @abstractmethod
    def should_retry(self, error_code: Optional[int], retry_count: int, max_retries: int) -> bool:
        """Determines if the login should be retried."""
        pass

    @abstractmethod
    def get_delay(self, retry_count: int, error_code: Optional[int] = None) -> float:
        """Returns the delay in seconds before retry number retry_count."""
        pass

    @abstractmethod
    async def wait_async(self, delay: float):
        """Waits before retry (async)."""
        pass


class SteamBackoffStrategy(RetryStrategy):
    """
    Exponential backoff for Steam logons.

    Every failure code is retried until the ceiling, except codes listed in
    RetryConfig.fatal_codes. Rate-limit codes start from a longer base delay.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Callable[[float], Awaitable] = asyncio.sleep
    ):
        self._config = config or RetryConfig()
        self._sleep = sleep

    @property
    def config(self) -> RetryConfig:
        return self._config

    def is_fatal(self, error_code: Optional[int]) -> bool:
        return error_code is not None and int(error_code) in self._config.fatal_codes

    def should_retry(self, error_code: Optional[int], retry_count: int, max_retries: int) -> bool:
        return retry_count <= max_retries and not self.is_fatal(error_code)

    def get_delay(self, retry_count: int, error_code: Optional[int] = None) -> float:
        return self._config.calculate_delay(retry_count, error_code)

    async def wait_async(self, delay: float):
        await self._sleep(delay)
