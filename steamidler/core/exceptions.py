"""
Custom exceptions for the idler.

Fatal errors (configuration, challenge, rejected login, exhausted retries) end
the process; InvalidSecretError and TransientConnectionError are handled
internally.
"""
from typing import Optional


class IdlerException(Exception):
    """Base exception for all idler errors."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Numeric Steam result code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(IdlerException):
    """Raised when required settings or credentials are missing."""
    pass


class InvalidSecretError(IdlerException):
    """Raised when a shared secret cannot be used to derive a code."""
    pass


class ChallengeRequiredError(IdlerException):
    """Raised when Steam demands an interactive Steam Guard code."""

    def __init__(
        self,
        message: str,
        domain: Optional[str] = None,
        code_mismatch: bool = False,
        error_code: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            domain: Email domain the code was sent to (None for mobile codes)
            code_mismatch: Whether the previously supplied code was rejected
            error_code: Numeric Steam result code (if available)
        """
        self.domain = domain
        self.code_mismatch = code_mismatch
        super().__init__(message, error_code)


class TransientConnectionError(IdlerException):
    """Raised for login failures carrying a retryable result code."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        super().__init__(message, error_code)

    @property
    def code(self) -> Optional[int]:
        return self.error_code


class LoginRejectedError(TransientConnectionError):
    """Raised when Steam returns a result code configured as non-retryable."""
    pass


class RetryExhaustedError(IdlerException):
    """Raised when the retry ceiling has been exceeded."""

    def __init__(self, attempts: int, max_retries: int, error_code: Optional[int] = None) -> None:
        self.attempts = attempts
        self.max_retries = max_retries
        super().__init__(
            f"Max retries exceeded after {attempts} failures (limit {max_retries})",
            error_code
        )
