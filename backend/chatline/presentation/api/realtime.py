"""
Realtime WebSocket endpoint.

WS /ws?token=<jwt>

Lifecycle of one connection:
1. Verify the token (close 1008 on failure, before accepting)
2. Accept, register in the ConnectionRegistry → presence snapshot to everyone
3. Read inbound frames only to notice the disconnect
4. Unregister (identity-checked) → presence snapshot to everyone left

Server → client frames:
    {"type": "presence_snapshot", "data": {"user_ids": [...]}, "ts": "..."}
    {"type": "message_delivery",  "data": {<MessageDTO>},       "ts": "..."}
"""

from logging import getLogger
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from chatline.application.realtime.registry import ConnectionRegistry
from chatline.config.logging_config import correlation_id_var
from chatline.config.settings import Config
from chatline.infrastructure.realtime.websocket_connection import (
    QueuedWebSocketConnection,
)
from chatline.presentation.dependencies.auth import (
    InvalidTokenError,
    decode_token,
    websocket_token,
)

logger = getLogger(__name__)


# ==================== ROUTER ====================

router = APIRouter(tags=["realtime"])


# ==================== ENDPOINTS ====================


@router.websocket("/ws")
async def realtime(websocket: WebSocket):
    try:
        user = decode_token(websocket_token(websocket))
    except InvalidTokenError as e:
        logger.info(f"[WS] Handshake rejected: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(e))
        return

    correlation_id_var.set(
        websocket.headers.get("X-Correlation-ID", f"ws-{user.user_id}")
    )
    registry = await websocket.app.state.dishka_container.get(ConnectionRegistry)

    await websocket.accept()
    connection = QueuedWebSocketConnection(
        user.user_id, websocket, queue_size=Config.CONNECTION_QUEUE_SIZE
    )
    connection.start()
    registry.register(user.user_id, connection)

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                logger.info(
                    f"[WS] {user.user_id} disconnected (code={frame.get('code')})"
                )
                break
    except WebSocketDisconnect as e:
        logger.info(f"[WS] {user.user_id} dropped (code={e.code})")
    finally:
        registry.unregister(user.user_id, connection)
        await connection.close()
