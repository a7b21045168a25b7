"""
Steam Guard one-time code generation.

Steam mobile authenticators share a secret (base64, or 40 hex characters)
with the server. Codes are TOTP values over that secret rendered in Steam's
5-character alphabet; the derivation itself is done by pyotp.
"""
import base64
import binascii
import re
import time
from datetime import datetime
from typing import Optional, Union

from pyotp.contrib import Steam

from ..exceptions import InvalidSecretError

CODE_INTERVAL = 30  # seconds
CODE_LENGTH = 5

HEX_SECRET = re.compile(r'[0-9a-fA-F]{40}')
_NOT_BASE64 = re.compile(r'[^A-Za-z0-9+/_-]')

Instant = Union[int, float, datetime]


class SteamGuardCodeGenerator:
    """
    Generates Steam Guard codes from a shared secret.

    Codes are stable within one 30-second window and change between windows.

    Example:
        >>> generator = SteamGuardCodeGenerator()
        >>> generator.generate(shared_secret)
        'R7KTX'
    """

    def __init__(self, interval: int = CODE_INTERVAL, digits: int = CODE_LENGTH):
        self._interval = interval
        self._digits = digits

    @staticmethod
    def decode_secret(secret: str) -> bytes:
        """
        Decode a shared secret to raw bytes.

        A 40-character hex string is read as hex. Anything else is read as
        base64 the lenient way Steam tooling does: characters outside the
        alphabet are skipped, decoding stops at the first '=', URL-safe
        characters are accepted and a dangling final character is dropped.

        Raises:
            InvalidSecretError: If nothing decodes
        """
        if not secret or not secret.strip():
            raise InvalidSecretError("Shared secret is empty")
        secret = secret.strip()
        if HEX_SECRET.fullmatch(secret):
            return bytes.fromhex(secret)

        chars = _NOT_BASE64.sub('', secret.split('=', 1)[0])
        chars = chars.replace('-', '+').replace('_', '/')
        if len(chars) % 4 == 1:
            chars = chars[:-1]
        try:
            raw = base64.b64decode(chars + '=' * (-len(chars) % 4))
        except (binascii.Error, ValueError) as e:
            raise InvalidSecretError(f"Shared secret is not valid base64: {e}")
        if not raw:
            raise InvalidSecretError("Shared secret decodes to no bytes")
        return raw

    @classmethod
    def to_base32(cls, secret: str) -> str:
        """
        Convert a shared secret to the base32 form pyotp expects.

        Raises:
            InvalidSecretError: If the secret is malformed
        """
        return base64.b32encode(cls.decode_secret(secret)).decode('ascii')

    def generate(self, secret: str, at: Optional[Instant] = None) -> str:
        """
        Generate the code valid at a given instant.

        Args:
            secret: Shared secret (base64 or 40 hex characters)
            at: Unix timestamp or datetime (defaults to now)

        Returns:
            Steam Guard code

        Raises:
            InvalidSecretError: If the secret is malformed
        """
        totp = Steam(self.to_base32(secret), interval=self._interval, digits=self._digits)
        if at is None:
            at = time.time()
        if not isinstance(at, datetime):
            at = int(at)
        return totp.at(at)
