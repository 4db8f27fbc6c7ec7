from chatline.infrastructure.realtime.websocket_connection import (
    QueuedWebSocketConnection,
    safe_send_json,
)

__all__ = [
    "QueuedWebSocketConnection",
    "safe_send_json",
]
