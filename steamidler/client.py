"""
High-level idler client.

Wires configuration, credentials, the Steam connection, the session
controller and the retry scheduler together and runs until a fatal error.
"""
from typing import Any, Dict, Optional

from .core.config import IdlerConfig
from .core.connection import SteamConnection, create_steam_connection
from .core.credentials import (
    CredentialStore,
    Credentials,
    EnvironmentSecrets,
    FileTokenStorage,
    SecretSource,
    TokenStorage,
)
from .core.guard import SteamGuardCodeGenerator
from .core.keepalive import KeepAliveServer
from .core.login import LoginOptionBuilder
from .core.logging import get_logger
from .core.retry import RetryScheduler, SteamBackoffStrategy, RetryStrategy
from .core.session import SessionController, SessionState


class SteamIdler:
    """
    Keeps one Steam account online and "in game".

    Example:
        >>> idler = SteamIdler(IdlerConfig.from_env())
        >>> await idler.run()  # runs until a fatal error is raised

    With custom collaborators (tests, other storage backends):
        >>> idler = SteamIdler(
        ...     config,
        ...     secrets=EnvironmentSecrets({'USERNAME': 'acct', 'PASSWORD': 'pw'}),
        ...     storage=MemoryTokenStorage(),
        ...     connection=FakeConnection(),
        ... )
    """

    def __init__(
        self,
        config: Optional[IdlerConfig] = None,
        *,
        secrets: Optional[SecretSource] = None,
        storage: Optional[TokenStorage] = None,
        connection: Optional[SteamConnection] = None,
        code_generator: Optional[SteamGuardCodeGenerator] = None,
        strategy: Optional[RetryStrategy] = None
    ):
        """
        Initialize the idler.

        Args:
            config: Idler configuration (uses defaults if not provided)
            secrets: Source of account secrets (defaults to environment)
            storage: Continuation token storage (defaults to config.token_path)
            connection: Steam connection (defaults to the steam library adapter)
            code_generator: Steam Guard code generator
            strategy: Retry strategy (defaults to SteamBackoffStrategy)
        """
        self._config = config or IdlerConfig.default()
        self._logger = get_logger('steamidler.client')

        self._store = CredentialStore(
            secrets or EnvironmentSecrets(),
            storage or FileTokenStorage(self._config.token_path)
        )
        self._connection = connection
        self._builder = LoginOptionBuilder(code_generator)
        self._strategy = strategy or SteamBackoffStrategy(self._config.retry)

        self._credentials: Optional[Credentials] = None
        self._controller: Optional[SessionController] = None
        self._scheduler: Optional[RetryScheduler] = None
        self._keepalive: Optional[KeepAliveServer] = None

    @property
    def config(self) -> IdlerConfig:
        return self._config

    @property
    def credential_store(self) -> CredentialStore:
        return self._store

    @property
    def controller(self) -> Optional[SessionController]:
        return self._controller

    @property
    def scheduler(self) -> Optional[RetryScheduler]:
        return self._scheduler

    def status(self) -> Dict[str, Any]:
        """Snapshot used by the keep-alive health endpoint."""
        state = self._controller.state if self._controller else SessionState.IDLE
        attempts = self._scheduler.state.attempts if self._scheduler else 0
        return {
            'state': state.value,
            'attempts': attempts,
            'max_retries': self._config.retry.max_retries,
        }

    async def start(self) -> 'SteamIdler':
        """
        Load credentials and start the first login attempt.

        Returns:
            Self for chaining

        Raises:
            ConfigurationError: If required credentials are missing
        """
        self._credentials = await self._store.load()
        self._logger.info(f"Loaded credentials for {self._credentials.account_name}")

        if self._connection is None:
            self._connection = create_steam_connection()

        self._controller = SessionController(
            self._connection,
            self._store,
            self._credentials,
            self._config.games,
            self._config.persona_state,
        )
        self._scheduler = RetryScheduler(
            self._controller,
            self._builder,
            self._strategy,
            max_retries=self._config.retry.max_retries,
        )

        if self._config.keepalive.enabled:
            self._keepalive = KeepAliveServer(self._config.keepalive, self.status)
            await self._keepalive.start()

        await self._scheduler.start()
        return self

    async def wait(self) -> None:
        """
        Block until the run ends.

        Raises:
            IdlerException: The fatal error that ended the run
        """
        if self._scheduler is None:
            raise RuntimeError("Idler not started")
        await self._scheduler.wait()

    async def run(self) -> None:
        """Start and run until a fatal error, always cleaning up."""
        try:
            await self.start()
            await self.wait()
        finally:
            await self.close()

    async def close(self) -> None:
        """Stop retries, the keep-alive server and the connection."""
        if self._scheduler is not None:
            await self._scheduler.stop()
        if self._keepalive is not None:
            await self._keepalive.stop()
            self._keepalive = None
        if self._connection is not None:
            try:
                await self._connection.close()
            except Exception as e:
                self._logger.debug(f"Ignoring close error: {e}")

    async def __aenter__(self) -> 'SteamIdler':
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
