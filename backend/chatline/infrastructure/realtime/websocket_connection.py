"""
Queued WebSocket connection handle.

push() never awaits: events go into a bounded asyncio.Queue and a writer
task owned by the connection drains it onto the socket. A slow or stalled
client fills its own queue and starts dropping events; it never holds up
the sender or other clients.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from chatline.config.settings import Config
from chatline.domain.ports.connection import ConnectionHandle
from chatline.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


async def safe_send_json(websocket: WebSocket, data: dict[str, Any]) -> bool:
    """Send JSON through the websocket. Returns False if the socket is gone."""
    if websocket.application_state != WebSocketState.CONNECTED:
        return False
    try:
        await websocket.send_json(data)
        return True
    except (WebSocketDisconnect, RuntimeError) as e:
        logger.debug(f"Failed to send websocket message: {e}")
        return False


class QueuedWebSocketConnection(ConnectionHandle):
    def __init__(
        self,
        user_id: UserId,
        websocket: WebSocket,
        queue_size: int = Config.CONNECTION_QUEUE_SIZE,
    ):
        self.user_id = user_id
        self.connected_at = datetime.now(timezone.utc)
        self._websocket = websocket
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=queue_size)
        self._writer: Optional[asyncio.Task] = None
        self._closed = False

    def start(self) -> None:
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def push(self, event: dict[str, Any]) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                f"[Connection] Queue full for {self.user_id}, dropping {event.get('type')}"
            )
            return False
        return True

    async def close(self) -> None:
        self._closed = True
        if self._writer is not None and not self._writer.done():
            self._writer.cancel()
            try:
                await self._writer
            except asyncio.CancelledError:
                pass

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        return self._queue.qsize()

    async def _drain(self) -> None:
        while True:
            event = await self._queue.get()
            if not await safe_send_json(self._websocket, event):
                logger.info(f"[Connection] Socket for {self.user_id} is gone, writer stopping")
                self._closed = True
                return
