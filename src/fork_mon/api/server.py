"""
API server for the fork choice dashboard.

Provides HTTP endpoints for:
- /spec - Chain timing of the monitored network
- /heads - Latest head of every node
- /chain-monitor - Node heads plus justified and finalized checkpoints
- /fork-choice - Block tree of the trailing epochs as JSON
- /fork-choice-dot - Full block tree as Graphviz DOT
- /health - Health check endpoint
- /metrics - Prometheus metrics endpoint

Every other path is served from the static output directory, when one
is configured.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from aiohttp import web

from .context import MONITOR_GETTER
from .routes import ROUTES

if TYPE_CHECKING:
    from fork_mon.monitor import MonitorService

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"
"""Page served at the root of the static directory."""


def _no_monitor() -> MonitorService | None:
    """Default monitor getter that returns None."""
    return None


@dataclass(frozen=True, slots=True)
class ApiServerConfig:
    """Configuration for the API server."""

    host: str = "0.0.0.0"
    """Host address to bind to."""

    port: int = 8080
    """Port to listen on."""

    enabled: bool = True
    """Whether the API server is enabled."""

    static_dir: str | None = None
    """Directory holding the browser UI. Not served when None."""


@dataclass(slots=True)
class ApiServer:
    """
    HTTP API server for the dashboard.

    Handlers read the monitor through `monitor_getter` so the server can
    start before any node was registered.
    """

    config: ApiServerConfig
    """Server configuration."""

    monitor_getter: Callable[[], MonitorService | None] = _no_monitor
    """Callable that returns the current MonitorService instance."""

    _runner: web.AppRunner | None = field(default=None, init=False)
    """The aiohttp application runner."""

    _site: web.TCPSite | None = field(default=None, init=False)
    """The TCP site for the server."""

    @property
    def monitor(self) -> MonitorService | None:
        """Get the current MonitorService instance."""
        return self.monitor_getter()

    def create_app(self) -> web.Application:
        """Build the aiohttp application with every route registered."""
        app = web.Application()
        app[MONITOR_GETTER] = self.monitor_getter
        app.add_routes([web.get(path, handler) for path, handler in ROUTES.items()])
        self._add_static_routes(app)
        return app

    def _add_static_routes(self, app: web.Application) -> None:
        if self.config.static_dir is None:
            return

        static_dir = Path(self.config.static_dir)
        if not static_dir.is_dir():
            logger.warning("Static directory %s does not exist, UI not served", static_dir)
            return

        index = static_dir / INDEX_FILE

        async def handle_index(_request: web.Request) -> web.StreamResponse:
            if not index.is_file():
                raise web.HTTPNotFound()
            return web.FileResponse(index)

        # API routes are registered first and take precedence.
        app.router.add_get("/", handle_index)
        app.router.add_static("/", static_dir)

    async def start(self) -> None:
        """Start the API server in the background."""
        if not self.config.enabled:
            logger.info("API server is disabled")
            return

        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await self._site.start()

        logger.info("API server listening on %s:%d", self.config.host, self.config.port)

    async def run(self) -> None:
        """
        Run the API server until shutdown.

        This method blocks until stop() is called.
        """
        await self.start()

        while self._runner is not None:
            await asyncio.sleep(1)

    def stop(self) -> None:
        """Request graceful shutdown."""
        if self._runner is not None:
            asyncio.create_task(self._async_stop())

    async def _async_stop(self) -> None:
        """Gracefully stop the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("API server stopped")
