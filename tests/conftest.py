"""Pytest fixtures for steamidler tests."""
import asyncio
import base64
from unittest.mock import AsyncMock

import pytest

from steamidler.core.config import RetryConfig
from steamidler.core.credentials import Credentials, CredentialStore, EnvironmentSecrets, MemoryTokenStorage
from steamidler.core.events import EventEmitter
from steamidler.core.exceptions import TransientConnectionError
from steamidler.core.retry import SteamBackoffStrategy

# 20 raw bytes, the size of a real Steam shared secret
SHARED_SECRET = base64.b64encode(b'12345678901234567890').decode('ascii')


class FakeConnection:
    """
    Scripted SteamConnection.

    Each log_on() consumes one step of the script. A step is an event tuple
    such as ('error', 84), ('logged_on',), ('challenge', 'gmail.com', False),
    ('sentry', b'...'), a list of such tuples, or ('raise', code) to fail
    before reaching Steam.
    """

    def __init__(self, script=None):
        self._emitter = EventEmitter()
        self.script = list(script or [])
        self.attempts = []
        self.log_offs = 0
        self.persona = None
        self.games = None
        self.closed = False
        self.steam_id = '76561198000000000'
        self.fail_log_off = False

    def on(self, event, callback):
        self._emitter.on(event, callback)
        return self

    async def emit(self, event, *args):
        await self._emitter.emit_async(event, *args)

    async def log_on(self, options):
        self.attempts.append(options)
        if not self.script:
            return
        step = self.script.pop(0)
        events = step if isinstance(step, list) else [step]
        for kind, *args in events:
            if kind == 'raise':
                raise TransientConnectionError("connection refused", args[0])
            await self.emit(kind, *args)

    async def log_off(self):
        self.log_offs += 1
        if self.fail_log_off:
            raise RuntimeError("not connected")

    async def set_persona(self, state):
        self.persona = state

    async def games_played(self, app_ids):
        self.games = tuple(app_ids)

    async def close(self):
        self.closed = True


async def settle(rounds: int = 200):
    """Let scheduled tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def shared_secret():
    """Valid base64 shared secret."""
    return SHARED_SECRET


@pytest.fixture
def credentials():
    """Credentials with account name and password only."""
    return Credentials(account_name='acct', password='pw')


@pytest.fixture
def storage():
    """Empty in-memory token storage."""
    return MemoryTokenStorage()


@pytest.fixture
def credential_store(storage):
    """Credential store over an empty environment and memory storage."""
    return CredentialStore(EnvironmentSecrets({}), storage)


@pytest.fixture
def sleep():
    """Sleep replacement that records delays without waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def strategy(sleep):
    """Default backoff strategy that does not actually wait."""
    return SteamBackoffStrategy(RetryConfig(), sleep=sleep)
