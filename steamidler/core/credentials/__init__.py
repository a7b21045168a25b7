"""
Credential management module.

Loads account credentials and keeps the continuation token (sentry) on
durable storage between runs.
"""
from .models import Credentials
from .protocols import SecretSource, TokenStorage
from .secrets import EnvironmentSecrets
from .memory_storage import MemoryTokenStorage
from .file_storage import FileTokenStorage
from .store import CredentialStore

__all__ = [
    'Credentials',
    'SecretSource',
    'TokenStorage',
    'EnvironmentSecrets',
    'MemoryTokenStorage',
    'FileTokenStorage',
    'CredentialStore',
]
