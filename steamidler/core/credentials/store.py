"""
Credential store.

Resolves the account credentials from a SecretSource and the continuation
token from TokenStorage, and persists new tokens issued by Steam.
"""
import base64
import binascii
from typing import Optional, Sequence

from .models import Credentials
from .protocols import SecretSource, TokenStorage
from ..exceptions import ConfigurationError
from ..logging import get_logger

# Accepted names per value; the lowercase aliases match older deployments
ACCOUNT_NAME_KEYS = ('USERNAME', 'username')
PASSWORD_KEYS = ('PASSWORD', 'password')
SHARED_SECRET_KEYS = ('SHARED_SECRET', 'shared')
SENTRY_KEYS = ('SENTRY',)


class CredentialStore:
    """
    Loads credentials and persists continuation tokens.

    Example:
        >>> store = CredentialStore(EnvironmentSecrets(), FileTokenStorage("sentry"))
        >>> credentials = await store.load()
        >>> await store.persist_token(new_sentry)
    """

    def __init__(self, secrets: SecretSource, storage: TokenStorage):
        """
        Initialize credential store.

        Args:
            secrets: Source of account name, password, shared secret, SENTRY
            storage: Durable slot for the continuation token
        """
        self._secrets = secrets
        self._storage = storage
        self._logger = get_logger('steamidler.credentials')

    @property
    def storage(self) -> TokenStorage:
        return self._storage

    def _get(self, names: Sequence[str]) -> Optional[str]:
        for name in names:
            value = self._secrets.get(name)
            if value:
                return value
        return None

    async def load(self) -> Credentials:
        """
        Resolve credentials.

        A token already in storage wins over the SENTRY setting; SENTRY is
        only used to seed an empty slot.

        Returns:
            Credentials instance

        Raises:
            ConfigurationError: If account name or password is missing
        """
        account_name = self._get(ACCOUNT_NAME_KEYS)
        password = self._get(PASSWORD_KEYS)
        if not account_name or not password:
            raise ConfigurationError(
                "USERNAME and PASSWORD environment variables are required."
            )

        shared_secret = self._get(SHARED_SECRET_KEYS)

        sentry_env = self._get(SENTRY_KEYS)
        if sentry_env and not self._storage.exists():
            await self._seed_from_env(sentry_env)

        sentry = None
        if self._storage.exists():
            try:
                sentry = await self._storage.read()
            except OSError as e:
                self._logger.warning(f"Failed to read sentry file: {e}")

        return Credentials(
            account_name=account_name,
            password=password,
            shared_secret=shared_secret,
            sentry=sentry or None,
        )

    async def _seed_from_env(self, value: str) -> None:
        try:
            token = base64.b64decode(value.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            self._logger.warning(f"Ignoring SENTRY env var, not valid base64: {e}")
            return
        if not token:
            self._logger.warning("Ignoring SENTRY env var, it decodes to an empty blob")
            return
        try:
            await self._storage.write(token)
        except OSError as e:
            self._logger.warning(f"Failed to write SENTRY from env: {e}")
            return
        self._logger.info("Wrote sentry file from SENTRY env var.")

    async def persist_token(self, token: bytes) -> None:
        """
        Persist a continuation token, overwriting any previous one.

        Args:
            token: Raw token bytes issued by Steam

        Raises:
            OSError: If the storage backend fails
        """
        await self._storage.write(token)

    def has_persisted_token(self) -> bool:
        return self._storage.exists()
