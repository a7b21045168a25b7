"""
Retry scheduler.

Runs the login loop: builds fresh options, hands them to the session
controller, and on failure waits with exponential backoff before trying
again. Terminal errors are collected on a future that run() waits on.
"""
import asyncio
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union

from .retry_strategy import RetryStrategy, SteamBackoffStrategy
from ..config import RetryConfig
from ..credentials import Credentials
from ..enums import EResult
from ..exceptions import (
    ConfigurationError,
    IdlerException,
    RetryExhaustedError,
    LoginRejectedError,
)
from ..login import LoginOptionBuilder
from ..logging import get_logger
from ..session import SessionController


@dataclass
class RetryState:
    """Failure counter for the current run."""
    attempts: int = 0
    max_attempts: int = 6

    @property
    def exhausted(self) -> bool:
        return self.attempts > self.max_attempts


class RetryScheduler:
    """
    Serializes login attempts.

    Only one attempt is outstanding at a time: a failure reported while a
    retry is already waiting is dropped.

    Example:
        >>> scheduler = RetryScheduler(controller, LoginOptionBuilder(), config.retry)
        >>> await scheduler.start()
        >>> await scheduler.wait()  # returns only by raising a fatal error
    """

    def __init__(
        self,
        controller: SessionController,
        builder: LoginOptionBuilder,
        strategy: Optional[RetryStrategy] = None,
        max_retries: Optional[int] = None,
        clock: Callable[[], Union[float, datetime]] = time.time
    ):
        """
        Initialize retry scheduler.

        Args:
            controller: Session controller to drive
            builder: Builds options for every attempt
            strategy: Backoff strategy (defaults to SteamBackoffStrategy)
            max_retries: Retry ceiling (defaults to the strategy's config)
            clock: Returns the instant used for one-time codes
        """
        self._controller = controller
        self._builder = builder
        self._strategy = strategy or SteamBackoffStrategy()
        if max_retries is None:
            config = getattr(self._strategy, 'config', None) or RetryConfig()
            max_retries = config.max_retries
        self._state = RetryState(max_attempts=max_retries)
        self._clock = clock
        self._logger = get_logger('steamidler.retry')
        self._done: Optional[asyncio.Future] = None
        self._retry_task: Optional[asyncio.Task] = None

        controller.bind(self.on_failure, self.abort)

    @property
    def state(self) -> RetryState:
        return self._state

    @property
    def credentials(self) -> Credentials:
        return self._controller.credentials

    @property
    def retry_pending(self) -> bool:
        return self._retry_task is not None and not self._retry_task.done()

    @property
    def finished(self) -> bool:
        return self._done is not None and self._done.done()

    def _ensure_done(self) -> asyncio.Future:
        if self._done is None:
            self._done = asyncio.get_running_loop().create_future()
        return self._done

    def abort(self, error: IdlerException) -> None:
        """Record a terminal error; later ones are ignored."""
        done = self._ensure_done()
        if done.done():
            return
        self._logger.debug(f"Run ending with {type(error).__name__}")
        done.set_exception(error)
        if self.retry_pending and self._retry_task is not asyncio.current_task():
            self._retry_task.cancel()

    async def start(self) -> None:
        """Schedule the first attempt."""
        self._ensure_done()
        await self.attempt()

    async def wait(self) -> None:
        """
        Wait until the run ends.

        Raises:
            IdlerException: The terminal error that ended the run
        """
        await self._ensure_done()

    async def stop(self) -> None:
        """Cancel a pending retry."""
        if self.retry_pending:
            self._retry_task.cancel()
            try:
                await self._retry_task
            except asyncio.CancelledError:
                pass
        self._retry_task = None

    async def attempt(self) -> None:
        """Build fresh options and start one login attempt."""
        if self.finished:
            return

        credentials = self._controller.credentials
        if not credentials.can_log_on_unattended():
            self._logger.error(
                "No SHARED_SECRET and no SENTRY file present. "
                "This environment will likely require an email code."
            )
            self._logger.error(
                "Set SHARED_SECRET env var (preferred) or provide a SENTRY env var "
                "with a base64 saved sentry blob."
            )
            self.abort(ConfigurationError("Neither SHARED_SECRET nor a sentry token is available"))
            return

        options = self._builder.build(credentials, self._clock())
        self._logger.info(f"Attempting login (attempt #{self._state.attempts + 1})")
        await self._controller.attempt(options)

    async def on_failure(self, code: Optional[int] = None) -> None:
        """
        Handle a failed attempt.

        Args:
            code: Steam result code of the failure
        """
        if self.finished:
            return
        if self.retry_pending:
            self._logger.debug(f"Retry already scheduled, ignoring {EResult.describe(code)}")
            return

        self._state.attempts += 1
        retry_count = self._state.attempts
        max_retries = self._state.max_attempts

        if not self._strategy.should_retry(code, retry_count, max_retries):
            if self._state.exhausted:
                self._logger.error("Max retries exceeded. Aborting.")
                self.abort(RetryExhaustedError(retry_count, max_retries, code))
            else:
                self._logger.error(f"{EResult.describe(code)} is not retryable. Aborting.")
                self.abort(LoginRejectedError(
                    f"Login failed with non-retryable result {EResult.describe(code)}",
                    code
                ))
            return

        delay = self._strategy.get_delay(retry_count, code)
        self._logger.info(f"Retrying in {round(delay)}s (retry {retry_count}/{max_retries})...")

        await self._controller.teardown()
        self._retry_task = asyncio.ensure_future(self._retry_after(delay))

    async def _retry_after(self, delay: float) -> None:
        await self._strategy.wait_async(delay)
        self._retry_task = None
        await self.attempt()
