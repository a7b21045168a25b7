"""
Login attempt options.

A fresh bundle is built right before every connection attempt because the
Steam Guard code is only valid for its 30-second window.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from ..credentials import Credentials
from ..exceptions import InvalidSecretError
from ..guard import SteamGuardCodeGenerator
from ..logging import get_logger


@dataclass(frozen=True)
class LoginAttemptOptions:
    """Credential bundle for a single logon call."""
    account_name: str
    password: str
    two_factor_code: Optional[str] = None
    sentry: Optional[bytes] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the fields that are set, omitting absent optional ones."""
        data: Dict[str, Any] = {
            'account_name': self.account_name,
            'password': self.password,
        }
        if self.two_factor_code is not None:
            data['two_factor_code'] = self.two_factor_code
        if self.sentry is not None:
            data['sentry'] = self.sentry
        return data

    def __repr__(self) -> str:
        return (
            f"LoginAttemptOptions(account_name={self.account_name!r}, "
            f"two_factor_code={'set' if self.two_factor_code else None}, "
            f"sentry={'set' if self.sentry else None})"
        )


class LoginOptionBuilder:
    """Assembles LoginAttemptOptions from Credentials."""

    def __init__(self, code_generator: Optional[SteamGuardCodeGenerator] = None):
        self._code_generator = code_generator or SteamGuardCodeGenerator()
        self._logger = get_logger('steamidler.login')

    def build(
        self,
        credentials: Credentials,
        now: Optional[Union[float, datetime]] = None
    ) -> LoginAttemptOptions:
        """
        Build options for one attempt.

        The continuation token is attached when present. With a shared
        secret a new code is generated on every call; if generation fails
        the code is left out and the login relies on the token (or runs into
        a Steam Guard challenge).

        Args:
            credentials: Loaded credentials
            now: Instant to generate the code for (defaults to current time)

        Returns:
            LoginAttemptOptions
        """
        sentry = None
        if credentials.sentry:
            sentry = credentials.sentry
            self._logger.info("Using existing sentry file for login.")

        two_factor_code = None
        if credentials.shared_secret:
            try:
                two_factor_code = self._code_generator.generate(credentials.shared_secret, now)
                self._logger.info("Using mobile 2FA (SHARED_SECRET) for login.")
            except InvalidSecretError as e:
                self._logger.warning(f"Failed to generate 2FA code from SHARED_SECRET: {e}")

        return LoginAttemptOptions(
            account_name=credentials.account_name,
            password=credentials.password,
            two_factor_code=two_factor_code,
            sentry=sentry,
        )
