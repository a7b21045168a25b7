"""
HTTP keep-alive endpoint.

Hosting platforms that expect a web process (Railway, Replit, ...) stop
containers that do not listen on $PORT. This server answers pings and
reports the session status.
"""
from typing import Any, Callable, Dict, Optional

from aiohttp import web

from ..config import KeepAliveConfig
from ..logging import get_logger

StatusProvider = Callable[[], Dict[str, Any]]


class KeepAliveServer:
    """
    Minimal aiohttp server.

    Routes:
        GET /        -> "alive"
        GET /health  -> JSON status from the status provider
    """

    def __init__(
        self,
        config: Optional[KeepAliveConfig] = None,
        status_provider: Optional[StatusProvider] = None
    ):
        self._config = config or KeepAliveConfig(enabled=True)
        self._status_provider = status_provider or (lambda: {})
        self._runner: Optional[web.AppRunner] = None
        self._logger = get_logger('steamidler.keepalive')

    @property
    def running(self) -> bool:
        return self._runner is not None

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get('/', self._handle_root)
        app.router.add_get('/health', self._handle_health)
        return app

    async def _handle_root(self, request: web.Request) -> web.Response:
        return web.Response(text='alive')

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response(self._status_provider())

    async def start(self) -> None:
        if self._runner is not None:
            return
        runner = web.AppRunner(self.build_app())
        await runner.setup()
        site = web.TCPSite(runner, self._config.host, self._config.port)
        await site.start()
        self._runner = runner
        self._logger.info(f"Keep-alive server listening on {self._config.host}:{self._config.port}")

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
