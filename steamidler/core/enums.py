"""Steam protocol constants used by the idler."""
from enum import IntEnum


class EResult(IntEnum):
    """Subset of Steam result codes seen during logon."""

    Invalid = 0
    OK = 1
    Fail = 2
    NoConnection = 3
    InvalidPassword = 5
    LoggedInElsewhere = 6
    InvalidProtocolVer = 7
    InvalidParam = 8
    Busy = 10
    InvalidState = 11
    AccessDenied = 15
    Timeout = 16
    Banned = 17
    AccountNotFound = 18
    ServiceUnavailable = 20
    NotLoggedOn = 21
    Pending = 22
    Cancelled = 52
    AccountDisabled = 43
    AccountLogonDenied = 63
    InvalidLoginAuthCode = 65
    AccountLogonDeniedNoMail = 66
    Suspended = 71
    Expired = 27
    TryAnotherCM = 48
    RateLimitExceeded = 84
    AccountLoginDeniedNeedTwoFactor = 85
    AccountLockedDown = 73
    TwoFactorCodeMismatch = 88
    AccountLoginDeniedThrottle = 87

    @classmethod
    def describe(cls, code) -> str:
        """Return 'Name (code)' for known codes, the bare code otherwise."""
        if code is None:
            return 'unknown'
        try:
            return f"{cls(code).name} ({int(code)})"
        except ValueError:
            return str(code)


class PersonaState(IntEnum):
    """Friends-list visibility states."""

    Offline = 0
    Online = 1
    Busy = 2
    Away = 3
    Snooze = 4
    LookingToTrade = 5
    LookingToPlay = 6
    Invisible = 7


# Codes for which Steam wants the client to back off harder
RATE_LIMIT_CODES = (EResult.RateLimitExceeded,)
