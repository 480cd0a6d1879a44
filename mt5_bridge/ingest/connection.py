"""
Producer connection management.

Accepts inbound TCP connections from the trading terminal and drives one
FrameDecoder + IngestionPipeline per connection. Each connection is one
asyncio task; messages it completes are applied in decoder order before the
next read, so a single connection never has two messages in flight.

Connection lifecycle:
    OPEN    - accepting data
    CLOSED  - producer sent end-of-stream, or the listener shut down
    ERRORED - transport failure; logged and torn down

No reconnection logic lives here and exclusivity is not enforced: a second
simultaneous producer is served independently and writes to the same store.
"""

import asyncio
import itertools
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..config.defaults import SocketParams
from ..data.framing import FrameDecoder
from ..errors import TransportError
from ..logging.config import get_ingest_logger
from ..utils.time import ingestion_timestamp
from .pipeline import IngestionPipeline

_connection_ids = itertools.count(1)


class ConnectionState(str, Enum):
    """Producer connection lifecycle states."""
    OPEN = "open"
    CLOSED = "closed"
    ERRORED = "errored"


@dataclass
class ProducerConnection:
    """Runtime state of one producer connection."""
    peer: str
    connection_id: int = field(default_factory=lambda: next(_connection_ids))
    decoder: FrameDecoder = field(default_factory=FrameDecoder)
    state: ConnectionState = ConnectionState.OPEN
    opened_at: str = field(default_factory=ingestion_timestamp)
    messages_processed: int = 0
    error: Optional[TransportError] = None
    task: Optional[asyncio.Task] = field(default=None, repr=False)

    def close(self) -> None:
        """Mark the connection closed unless it already failed."""
        if self.state == ConnectionState.OPEN:
            self.state = ConnectionState.CLOSED

    def fail(self, error: TransportError) -> None:
        """Mark the connection errored and keep the transport error."""
        self.state = ConnectionState.ERRORED
        self.error = error


def _format_peer(peername: Any) -> str:
    if isinstance(peername, (tuple, list)) and len(peername) >= 2:
        return f"{peername[0]}:{peername[1]}"
    return str(peername) if peername else "unknown"


class ConnectionManager:
    """TCP listener feeding producer connections into the ingestion pipeline."""

    HISTORY_SIZE = 50  # Finished connections kept for inspection

    def __init__(self, pipeline: IngestionPipeline, params: Optional[SocketParams] = None) -> None:
        self.logger = get_ingest_logger(__name__)
        self.pipeline = pipeline
        self.params = params or SocketParams()
        self._server: Optional[asyncio.AbstractServer] = None
        self._connections: dict[int, ProducerConnection] = {}
        self.recent_connections: deque[ProducerConnection] = deque(maxlen=self.HISTORY_SIZE)

    @property
    def running(self) -> bool:
        """True while the listener is accepting connections."""
        return self._server is not None and self._server.is_serving()

    @property
    def active_connections(self) -> list[ProducerConnection]:
        return list(self._connections.values())

    @property
    def port(self) -> Optional[int]:
        """Bound port, useful when configured with port 0."""
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """Bind the listener and start accepting connections."""
        if self._server is not None:
            return

        self._server = await asyncio.start_server(
            self.handle_connection,
            host=self.params.host,
            port=self.params.port,
        )
        self.logger.info(
            "Socket server listening",
            host=self.params.host,
            port=self.port,
        )

    async def serve_forever(self) -> None:
        """Start if needed and serve until cancelled."""
        await self.start()
        assert self._server is not None
        try:
            await self._server.serve_forever()
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop accepting connections and tear down open ones."""
        if self._server is None:
            return

        server = self._server
        self._server = None
        server.close()

        tasks = [conn.task for conn in self._connections.values()
                 if conn.task is not None and not conn.task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        await server.wait_closed()
        self.logger.info("Socket server stopped")

    async def handle_connection(self, reader: asyncio.StreamReader,
                                writer: asyncio.StreamWriter) -> None:
        """Drive one producer connection from open to closed or errored."""
        conn = ProducerConnection(peer=_format_peer(writer.get_extra_info("peername")))
        conn.task = asyncio.current_task()
        self._connections[conn.connection_id] = conn

        self.logger.info("Producer connected", peer=conn.peer, connection_id=conn.connection_id)

        try:
            while True:
                chunk = await reader.read(self.params.read_size)
                if not chunk:
                    break

                for message in conn.decoder.feed(chunk):
                    self.pipeline.process_message(message, peer=conn.peer)
                    conn.messages_processed += 1

            conn.close()
            self.logger.info(
                "Producer disconnected",
                peer=conn.peer,
                messages=conn.messages_processed,
            )

        except asyncio.CancelledError:
            conn.close()
            self.logger.info("Producer connection cancelled", peer=conn.peer)
            raise

        except (ConnectionError, OSError) as e:
            conn.fail(TransportError(f"Socket error: {e}", peer=conn.peer))
            self.logger.error("Socket error", peer=conn.peer, error=str(e))

        except Exception as e:
            conn.fail(TransportError(f"Unexpected connection failure: {e}", peer=conn.peer))
            self.logger.exception("Unexpected error on producer connection", peer=conn.peer)

        finally:
            discarded = conn.decoder.close()
            if discarded:
                self.logger.warning(
                    "Discarded incomplete trailing message",
                    peer=conn.peer,
                    bytes=discarded,
                )
            self._connections.pop(conn.connection_id, None)
            self.recent_connections.append(conn)
            await self._close_writer(writer, conn.peer)

    async def _close_writer(self, writer: asyncio.StreamWriter, peer: str) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError) as e:
            self.logger.debug("Error while closing producer socket", peer=peer, error=str(e))
