"""
Unit tests for credential management.

Tests Credentials, the token storages and CredentialStore.
"""
import base64
import tempfile
from pathlib import Path

import pytest

from steamidler.core.credentials import (
    Credentials,
    CredentialStore,
    EnvironmentSecrets,
    FileTokenStorage,
    MemoryTokenStorage,
    SecretSource,
    TokenStorage,
)
from steamidler.core.exceptions import ConfigurationError


class TestCredentials:
    """Tests for Credentials model."""

    def test_unattended_requires_secret_or_sentry(self):
        """Test unattended logon needs a shared secret or a token."""
        assert Credentials('acct', 'pw').can_log_on_unattended() is False
        assert Credentials('acct', 'pw', shared_secret='abc').can_log_on_unattended() is True
        assert Credentials('acct', 'pw', sentry=b'\x01').can_log_on_unattended() is True

    def test_sentry_b64(self):
        """Test token is rendered as base64."""
        creds = Credentials('acct', 'pw', sentry=b'sentry')

        assert creds.sentry_b64() == base64.b64encode(b'sentry').decode()
        assert Credentials('acct', 'pw').sentry_b64() is None

    def test_repr_hides_secrets(self):
        """Test repr does not leak secrets."""
        creds = Credentials('acct', 'hunter2', shared_secret='topsecret', sentry=b'abc')

        text = repr(creds)

        assert 'hunter2' not in text
        assert 'topsecret' not in text
        assert 'acct' in text


class TestEnvironmentSecrets:
    """Tests for EnvironmentSecrets."""

    def test_implements_protocol(self):
        """Test instance satisfies its protocol."""
        assert isinstance(EnvironmentSecrets({}), SecretSource)

    def test_empty_values_are_unset(self):
        """Test blank values count as unset."""
        secrets = EnvironmentSecrets({'USERNAME': '  ', 'PASSWORD': 'pw'})

        assert secrets.get('USERNAME') is None
        assert secrets.get('PASSWORD') == 'pw'
        assert secrets.get('MISSING') is None

    def test_first(self):
        """Test first returns the first alias that is set."""
        secrets = EnvironmentSecrets({'shared': 'abc'})

        assert secrets.first('SHARED_SECRET', 'shared') == 'abc'


class TestMemoryTokenStorage:
    """Tests for MemoryTokenStorage."""

    def test_implements_protocol(self):
        """Test instance satisfies its protocol."""
        assert isinstance(MemoryTokenStorage(), TokenStorage)

    @pytest.mark.asyncio
    async def test_write_overwrites(self):
        """Test writes replace the previous token."""
        storage = MemoryTokenStorage()

        await storage.write(b'one')
        await storage.write(b'two')

        assert await storage.read() == b'two'
        assert storage.writes == 2

    @pytest.mark.asyncio
    async def test_initial_token(self):
        """Test storage created with a token."""
        storage = MemoryTokenStorage(b'token')

        assert storage.exists() is True
        assert await storage.read() == b'token'


class TestFileTokenStorage:
    """Tests for FileTokenStorage."""

    @pytest.fixture
    def temp_path(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir) / 'sentry'

    def test_implements_protocol(self, temp_path):
        """Test instance satisfies its protocol."""
        assert isinstance(FileTokenStorage(temp_path), TokenStorage)

    @pytest.mark.asyncio
    async def test_missing_file(self, temp_path):
        """Test missing file reads as no token."""
        storage = FileTokenStorage(temp_path)

        assert storage.exists() is False
        assert await storage.read() is None

    @pytest.mark.asyncio
    async def test_write_and_read(self, temp_path):
        """Test token bytes round trip through the file."""
        storage = FileTokenStorage(temp_path)

        await storage.write(b'\x00\x01sentry')

        assert storage.exists() is True
        assert temp_path.read_bytes() == b'\x00\x01sentry'
        assert await storage.read() == b'\x00\x01sentry'

    @pytest.mark.asyncio
    async def test_write_overwrites(self, temp_path):
        """Test writes replace the previous token."""
        storage = FileTokenStorage(temp_path)

        await storage.write(b'a much longer first token')
        await storage.write(b'short')

        assert await storage.read() == b'short'

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, temp_path):
        """Test write creates missing directories."""
        storage = FileTokenStorage(temp_path.parent / 'nested' / 'sentry')

        await storage.write(b'x')

        assert storage.path.is_file()


class TestCredentialStore:
    """Tests for CredentialStore."""

    def make_store(self, env, storage=None):
        storage = storage if storage is not None else MemoryTokenStorage()
        return CredentialStore(EnvironmentSecrets(env), storage), storage

    @pytest.mark.asyncio
    async def test_load_minimal(self):
        """Test loading account name and password only."""
        store, _ = self.make_store({'USERNAME': 'acct', 'PASSWORD': 'pw'})

        creds = await store.load()

        assert creds.account_name == 'acct'
        assert creds.password == 'pw'
        assert creds.shared_secret is None
        assert creds.sentry is None

    @pytest.mark.asyncio
    async def test_load_lowercase_aliases(self):
        """Test lowercase variable names are accepted."""
        store, _ = self.make_store({'username': 'acct', 'password': 'pw', 'shared': 'c2VjcmV0'})

        creds = await store.load()

        assert creds.account_name == 'acct'
        assert creds.shared_secret == 'c2VjcmV0'

    @pytest.mark.asyncio
    @pytest.mark.parametrize("env", [
        {},
        {'USERNAME': 'acct'},
        {'PASSWORD': 'pw'},
        {'USERNAME': '', 'PASSWORD': 'pw'},
    ])
    async def test_missing_account_or_password(self, env):
        """Test missing account name or password is fatal."""
        store, _ = self.make_store(env)

        with pytest.raises(ConfigurationError, match="USERNAME and PASSWORD"):
            await store.load()

    @pytest.mark.asyncio
    async def test_uses_stored_token(self):
        """Test stored token is loaded."""
        store, _ = self.make_store(
            {'USERNAME': 'acct', 'PASSWORD': 'pw'},
            MemoryTokenStorage(b'stored')
        )

        creds = await store.load()

        assert creds.sentry == b'stored'

    @pytest.mark.asyncio
    async def test_seeds_storage_from_sentry_env(self):
        """Test SENTRY seeds an empty storage."""
        env = {
            'USERNAME': 'acct',
            'PASSWORD': 'pw',
            'SENTRY': base64.b64encode(b'from-env').decode(),
        }
        store, storage = self.make_store(env)

        creds = await store.load()

        assert creds.sentry == b'from-env'
        assert storage.writes == 1
        assert store.has_persisted_token() is True

    @pytest.mark.asyncio
    async def test_stored_token_wins_over_env(self):
        """Test SENTRY never overwrites a stored token."""
        env = {
            'USERNAME': 'acct',
            'PASSWORD': 'pw',
            'SENTRY': base64.b64encode(b'from-env').decode(),
        }
        store, storage = self.make_store(env, MemoryTokenStorage(b'stored'))

        creds = await store.load()

        assert creds.sentry == b'stored'
        assert storage.writes == 0

    @pytest.mark.asyncio
    async def test_invalid_sentry_env_is_ignored(self):
        """Test invalid SENTRY base64 is ignored."""
        env = {'USERNAME': 'acct', 'PASSWORD': 'pw', 'SENTRY': 'not base64!!'}
        store, storage = self.make_store(env)

        creds = await store.load()

        assert creds.sentry is None
        assert storage.exists() is False

    @pytest.mark.asyncio
    async def test_persist_token(self):
        """Test persisting a new token."""
        store, storage = self.make_store({'USERNAME': 'acct', 'PASSWORD': 'pw'})
        assert store.has_persisted_token() is False

        await store.persist_token(b'new')

        assert await storage.read() == b'new'
        assert store.has_persisted_token() is True
