"""Environment-backed secret source."""
import os
from typing import Mapping, Optional

from .protocols import SecretSource


class EnvironmentSecrets(SecretSource):
    """
    Reads secrets from environment variables.

    Empty strings count as unset.

    Args:
        environ: Mapping to read from (defaults to os.environ)
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def get(self, name: str) -> Optional[str]:
        value = self._environ.get(name)
        if value is None or not value.strip():
            return None
        return value

    def first(self, *names: str) -> Optional[str]:
        """Return the first of several alternative names that is set."""
        for name in names:
            value = self.get(name)
            if value is not None:
                return value
        return None
