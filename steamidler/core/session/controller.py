"""
Session controller.

Owns the Steam connection, issues logon attempts and reacts to the events the
connection reports. Failures are handed to a failure handler (the retry
scheduler); challenges end the run.
"""
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence

from ..connection import ConnectionEvents, SteamConnection
from ..credentials import CredentialStore, Credentials
from ..enums import EResult, PersonaState
from ..exceptions import ChallengeRequiredError, IdlerException, TransientConnectionError
from ..login import LoginAttemptOptions
from ..logging import get_logger

FailureHandler = Callable[[Optional[int]], Awaitable[None]]
AbortHandler = Callable[[IdlerException], None]

CHALLENGE_REMEDIATION = (
    "Solution: enable mobile auth and set SHARED_SECRET, "
    "or set SENTRY after a successful desktop login."
)


class SessionState(Enum):
    """Connection lifecycle states."""
    IDLE = 'idle'
    CONNECTING = 'connecting'
    CONNECTED = 'connected'
    CHALLENGE_REQUESTED = 'challenge_requested'
    FAILED = 'failed'


class SessionController:
    """
    Drives a single Steam session.

    States: IDLE -> CONNECTING -> {CONNECTED, CHALLENGE_REQUESTED, FAILED}.
    CHALLENGE_REQUESTED is terminal; events arriving after it are ignored.
    """

    def __init__(
        self,
        connection: SteamConnection,
        credential_store: CredentialStore,
        credentials: Credentials,
        games: Sequence[int],
        persona_state: PersonaState = PersonaState.Invisible
    ):
        """
        Initialize session controller.

        Args:
            connection: Steam connection, owned by this controller from now on
            credential_store: Store used to persist new continuation tokens
            credentials: Loaded credentials; `sentry` is updated in place
            games: App ids to declare once logged on
            persona_state: Visibility to set once logged on
        """
        self._connection = connection
        self._store = credential_store
        self._credentials = credentials
        self._games = tuple(games)
        self._persona_state = persona_state
        self._logger = get_logger('steamidler.session')
        self._state = SessionState.IDLE
        self._on_failure: Optional[FailureHandler] = None
        self._on_abort: Optional[AbortHandler] = None

        connection.on(ConnectionEvents.CHALLENGE, self._handle_challenge)
        connection.on(ConnectionEvents.SENTRY, self._handle_sentry)
        connection.on(ConnectionEvents.LOGGED_ON, self._handle_logged_on)
        connection.on(ConnectionEvents.ERROR, self._handle_error)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def connection(self) -> SteamConnection:
        return self._connection

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def bind(self, on_failure: FailureHandler, on_abort: AbortHandler) -> None:
        """
        Attach the handlers that receive failures and terminal errors.

        Args:
            on_failure: Coroutine function called with the failure code
            on_abort: Called with the error that should end the run
        """
        self._on_failure = on_failure
        self._on_abort = on_abort

    def _set_state(self, state: SessionState) -> None:
        if state is not self._state:
            self._logger.debug(f"Session state: {self._state.value} -> {state.value}")
        self._state = state

    def _abort(self, error: IdlerException) -> None:
        if self._on_abort is not None:
            self._on_abort(error)

    @property
    def aborted(self) -> bool:
        return self._state is SessionState.CHALLENGE_REQUESTED

    async def attempt(self, options: LoginAttemptOptions) -> None:
        """
        Start a logon with the given options.

        The outcome arrives through connection events.

        Args:
            options: Fresh options for this attempt
        """
        if self.aborted:
            return
        self._set_state(SessionState.CONNECTING)
        try:
            await self._connection.log_on(options)
        except TransientConnectionError as e:
            self._logger.error(f"Immediate logOn error: {e}")
            await self._handle_error(e.code)

    async def teardown(self) -> None:
        """Log off, ignoring errors from an already broken connection."""
        try:
            await self._connection.log_off()
        except Exception as e:
            self._logger.debug(f"Ignoring log off error: {e}")

    # =========================================================================
    # Connection events
    # =========================================================================

    async def _handle_challenge(self, domain: Optional[str] = None, code_mismatch: bool = False) -> None:
        if self.aborted:
            return
        self._set_state(SessionState.CHALLENGE_REQUESTED)

        where = f"for domain: {domain}" if domain else "from the mobile authenticator"
        self._logger.error(f"steamGuard requested a code {where}")
        if code_mismatch:
            self._logger.error("The previously supplied code was rejected.")
        self._logger.error("This deployment does NOT accept interactive codes. Aborting to avoid rate limits.")
        self._logger.error(CHALLENGE_REMEDIATION)

        self._abort(ChallengeRequiredError(
            f"Steam Guard code requested {where}. {CHALLENGE_REMEDIATION}",
            domain=domain,
            code_mismatch=code_mismatch,
        ))

    async def _handle_sentry(self, token: bytes) -> None:
        try:
            await self._store.persist_token(token)
        except OSError as e:
            self._logger.warning(f"Failed to save sentry file: {e}")
        else:
            self._logger.info("Saved sentry file locally.")
        self._credentials.sentry = token
        self._logger.info(
            "Store this value in your SENTRY env var (base64) to avoid future email codes:"
        )
        self._logger.info(self._credentials.sentry_b64())

    async def _handle_logged_on(self) -> None:
        if self.aborted:
            return
        self._set_state(SessionState.CONNECTED)
        self._logger.info(f"{self._connection.steam_id} - Successfully logged on")
        try:
            await self._connection.set_persona(self._persona_state)
            await self._connection.games_played(self._games)
        except TransientConnectionError as e:
            self._logger.error(f"Failed to declare presence: {e}")
            await self._handle_error(e.code)
            return
        self._logger.info(
            f"Persona set to {self._persona_state.name}, playing {len(self._games)} apps"
        )

    async def _handle_error(self, code: Optional[int] = None) -> None:
        if self.aborted:
            return
        self._logger.error(f"Steam error, eresult code: {EResult.describe(code)}")
        self._set_state(SessionState.FAILED)
        if self._on_failure is not None:
            await self._on_failure(code)
