"""
Credential data models.
"""
import base64
from dataclasses import dataclass
from typing import Optional


@dataclass
class Credentials:
    """
    Everything needed to log the account on.

    Attributes:
        account_name: Steam account name
        password: Account password
        shared_secret: Base64 mobile authenticator secret (optional)
        sentry: Continuation token (sentry blob) from an earlier login (optional)
    """
    account_name: str
    password: str
    shared_secret: Optional[str] = None
    sentry: Optional[bytes] = None

    @property
    def has_shared_secret(self) -> bool:
        return bool(self.shared_secret)

    @property
    def has_sentry(self) -> bool:
        return bool(self.sentry)

    def can_log_on_unattended(self) -> bool:
        """
        Check whether a login can pass Steam Guard without user input.

        Returns:
            True if a shared secret or a continuation token is available
        """
        return self.has_shared_secret or self.has_sentry

    def sentry_b64(self) -> Optional[str]:
        """Base64 form of the continuation token, as stored in SENTRY."""
        if not self.sentry:
            return None
        return base64.b64encode(self.sentry).decode('ascii')

    def __repr__(self) -> str:
        return (
            f"Credentials(account_name={self.account_name!r}, password='***', "
            f"shared_secret={'***' if self.shared_secret else None}, "
            f"sentry={'<%d bytes>' % len(self.sentry) if self.sentry else None})"
        )
