"""
WebSocket transport for server → client events.

The token travels in the ``token`` query parameter. Any failure to open the
socket, and any close once open, surfaces as ConnectionLostError so the
sync agent has a single thing to react to.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional
from urllib.parse import urlencode

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from chatline.client.errors import ConnectionLostError
from chatline.config.settings import Config

logger = logging.getLogger(__name__)


class EventTransport(ABC):
    @abstractmethod
    async def connect(self) -> None: ...

    @abstractmethod
    async def receive(self) -> dict[str, Any]: ...

    @abstractmethod
    async def close(self) -> None: ...


class WebSocketTransport(EventTransport):
    def __init__(self, token: str, url: str = Config.CLIENT_WS_URL):
        self._url = f"{url}?{urlencode({'token': token})}"
        self._ws: Optional[Any] = None

    async def connect(self) -> None:
        await self.close()
        try:
            self._ws = await websockets.connect(self._url)
        except (OSError, WebSocketException) as e:
            raise ConnectionLostError(f"Could not connect: {e}") from e
        logger.info("[Transport] Connected")

    async def receive(self) -> dict[str, Any]:
        """Next event object. Frames that are not a JSON object are skipped."""
        while True:
            if self._ws is None:
                raise ConnectionLostError("Not connected")
            try:
                raw = await self._ws.recv()
            except ConnectionClosed as e:
                self._ws = None
                raise ConnectionLostError(f"Connection closed: {e}") from e
            try:
                event = json.loads(raw)
            except ValueError as e:
                logger.warning(f"[Transport] Skipping undecodable frame: {e}")
                continue
            if not isinstance(event, dict):
                logger.warning(f"[Transport] Skipping non-object frame: {type(event).__name__}")
                continue
            return event

    async def close(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None:
            await ws.close()
