"""HTTP keep-alive endpoint for hosted deployments."""
from .server import KeepAliveServer

__all__ = [
    'KeepAliveServer',
]
