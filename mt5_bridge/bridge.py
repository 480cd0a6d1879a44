"""
Main bridge coordinator.

Wires the market data store, the ingestion pipeline, the producer socket
listener, the query surface and the HTTP API together, and runs both
listeners on one event loop:

    Producer socket → FrameDecoder → classify → IngestionPipeline → Store
    HTTP clients    → FastAPI → QuerySurface → Store
"""

import asyncio
from typing import Optional

import structlog
import uvicorn

from .api.http import create_app
from .config.defaults import BridgeConfig, get_default_config
from .data.store import MarketDataStore
from .ingest.connection import ConnectionManager
from .ingest.pipeline import IngestionPipeline
from .query import QuerySurface

logger = structlog.get_logger(__name__)


class MarketDataBridge:
    """Owns the process-wide store and the components sharing it."""

    def __init__(self, config: Optional[BridgeConfig] = None) -> None:
        self.logger = logger
        self.config = config or get_default_config()

        self.store = MarketDataStore()
        self.pipeline = IngestionPipeline(self.store)
        self.connections = ConnectionManager(self.pipeline, self.config.socket)
        self.query = QuerySurface(
            self.store,
            self.config.query,
            listener_running=lambda: self.connections.running,
        )
        self.app = create_app(self.query)

        self.logger.info("MT5 bridge initialized")

    def create_http_server(self) -> uvicorn.Server:
        """Build the uvicorn server for the HTTP API."""
        http_config = uvicorn.Config(
            self.app,
            host=self.config.http.host,
            port=self.config.http.port,
            log_config=None,
            access_log=False,
        )
        return uvicorn.Server(http_config)

    async def run(self) -> None:
        """Run the socket listener and the HTTP server until either stops."""
        http_server = self.create_http_server()

        await self.connections.start()
        self.logger.info(
            "HTTP server listening",
            host=self.config.http.host,
            port=self.config.http.port,
        )

        socket_task = asyncio.create_task(self.connections.serve_forever())
        http_task = asyncio.create_task(http_server.serve())

        try:
            done, _ = await asyncio.wait(
                {socket_task, http_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
            for task in done:
                if task.cancelled():
                    continue
                error = task.exception()
                if error is not None:
                    raise error
        finally:
            http_server.should_exit = True
            socket_task.cancel()
            await asyncio.gather(socket_task, http_task, return_exceptions=True)
            await self.connections.stop()
            self.logger.info("MT5 bridge stopped", ingestion=self.pipeline.metrics.get_stats())
