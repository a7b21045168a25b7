"""
Steam connection backed by the `steam` package.

The library runs on gevent. Every call into it happens on one dedicated
thread that owns a gevent hub; results and events are handed back to the
asyncio loop with thread-safe callbacks.
"""
import asyncio
import concurrent.futures
import threading
from typing import Callable, Optional, Sequence

import gevent
from steam.client import SteamClient
from steam.enums import EResult as SteamResult, EPersonaState

from .protocols import ConnectionEvents, SteamConnection
from ..enums import EResult, PersonaState
from ..events import EventEmitter
from ..exceptions import TransientConnectionError
from ..login import LoginAttemptOptions
from ..logging import get_logger

HUB_START_TIMEOUT = 10.0
# SteamClient sleeps 0.5s before emitting logon events
LOGON_EVENT_GRACE = 1.0


class _IdlerSteamClient(SteamClient):
    """SteamClient that takes its sentry from the current attempt."""

    def __init__(self, connection: 'SteamUserConnection'):
        super().__init__()
        self._connection = connection

    def get_sentry(self, username):
        return self._connection.current_sentry

    def store_sentry(self, username, sentry_bytes):
        self._connection.forward(ConnectionEvents.SENTRY, bytes(sentry_bytes))
        return True


class SteamUserConnection(SteamConnection):
    """
    SteamConnection implementation using steam.client.SteamClient.

    Example:
        >>> connection = SteamUserConnection()
        >>> connection.on(ConnectionEvents.LOGGED_ON, on_logged_on)
        >>> await connection.log_on(options)
    """

    def __init__(self):
        self._emitter = EventEmitter()
        self._logger = get_logger('steamidler.connection')
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._hub = None
        self._hub_ready = threading.Event()
        self._stopping = threading.Event()
        self._client: Optional[_IdlerSteamClient] = None
        self._logged_on = False
        self._closing = False
        self._attempt_resolved = False
        self.current_sentry: Optional[bytes] = None

    @property
    def steam_id(self) -> Optional[str]:
        if self._client is None or not self._client.logged_on:
            return None
        return str(self._client.steam_id)

    def on(self, event: str, callback: Callable) -> 'SteamUserConnection':
        self._emitter.on(event, callback)
        return self

    # =========================================================================
    # Thread bridge
    # =========================================================================

    def forward(self, event: str, *args) -> None:
        """Hand an event from the gevent thread to the asyncio loop."""
        if event in (ConnectionEvents.CHALLENGE, ConnectionEvents.ERROR, ConnectionEvents.LOGGED_ON):
            self._attempt_resolved = True
        if self._loop is None or self._loop.is_closed():
            return
        asyncio.run_coroutine_threadsafe(
            self._emitter.emit_async(event, *args),
            self._loop
        )

    def _run_hub(self) -> None:
        self._hub = gevent.get_hub()
        self._client = _IdlerSteamClient(self)
        self._client.on(SteamClient.EVENT_LOGGED_ON, self._on_logged_on)
        self._client.on(SteamClient.EVENT_AUTH_CODE_REQUIRED, self._on_auth_code_required)
        self._client.on(SteamClient.EVENT_ERROR, self._on_error)
        self._client.on(SteamClient.EVENT_DISCONNECTED, self._on_disconnected)
        self._hub_ready.set()

        while not self._stopping.is_set():
            gevent.sleep(0.5)

    async def _ensure_thread(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._loop = asyncio.get_running_loop()
        self._hub_ready.clear()
        self._stopping.clear()
        self._thread = threading.Thread(
            target=self._run_hub,
            name='steam-gevent-hub',
            daemon=True
        )
        self._thread.start()
        ready = await self._loop.run_in_executor(None, self._hub_ready.wait, HUB_START_TIMEOUT)
        if not ready:
            raise TransientConnectionError("Steam client thread did not start", EResult.Fail)

    def _submit(self, fn: Callable, *args, **kwargs) -> 'asyncio.Future':
        """Run fn in a greenlet on the hub thread and await its result."""
        future: concurrent.futures.Future = concurrent.futures.Future()

        def runner():
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)

        self._hub.loop.run_callback_threadsafe(gevent.spawn, runner)
        return asyncio.wrap_future(future)

    # =========================================================================
    # SteamClient callbacks (hub thread)
    # =========================================================================

    def _on_logged_on(self):
        self._logged_on = True
        self.forward(ConnectionEvents.LOGGED_ON)

    def _on_auth_code_required(self, is_2fa, code_mismatch):
        self._logger.debug(f"Steam Guard code required (2fa={is_2fa}, mismatch={code_mismatch})")
        domain = None if is_2fa else 'email'
        self.forward(ConnectionEvents.CHALLENGE, domain, bool(code_mismatch))

    def _on_error(self, result):
        self.forward(ConnectionEvents.ERROR, int(result))

    def _on_disconnected(self):
        was_logged_on = self._logged_on
        self._logged_on = False
        if was_logged_on and not self._closing:
            self._logger.warning("Disconnected from Steam")
            self.forward(ConnectionEvents.ERROR, int(EResult.NoConnection))

    def _login(self, options: LoginAttemptOptions) -> int:
        result = self._client.login(
            options.account_name,
            options.password,
            two_factor_code=options.two_factor_code,
        )
        if result != SteamResult.OK:
            gevent.sleep(LOGON_EVENT_GRACE)
            if not self._attempt_resolved:
                self.forward(ConnectionEvents.ERROR, int(result))
        return int(result)

    def _teardown(self) -> None:
        if self._client.logged_on:
            self._client.logout()
        self._client.disconnect()

    # =========================================================================
    # SteamConnection
    # =========================================================================

    async def log_on(self, options: LoginAttemptOptions) -> None:
        await self._ensure_thread()
        self._closing = False
        self._attempt_resolved = False
        self.current_sentry = options.sentry
        try:
            result = await self._submit(self._login, options)
        except (OSError, gevent.Timeout) as e:
            raise TransientConnectionError(f"Immediate logOn error: {e}", int(EResult.NoConnection))
        self._logger.debug(f"Logon response: {EResult.describe(result)}")

    async def log_off(self) -> None:
        if self._client is None or self._hub is None:
            return
        self._closing = True
        await self._submit(self._teardown)

    async def set_persona(self, state: PersonaState) -> None:
        await self._submit(self._client.change_status, persona_state=EPersonaState(int(state)))

    async def games_played(self, app_ids: Sequence[int]) -> None:
        await self._submit(self._client.games_played, list(app_ids))

    async def close(self) -> None:
        try:
            await self.log_off()
        finally:
            self._stopping.set()
            if self._thread is not None:
                await asyncio.get_running_loop().run_in_executor(None, self._thread.join, 5.0)
                self._thread = None
