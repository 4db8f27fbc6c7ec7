"""Message queries."""

from chatline.application.queries.messages.get_message_history import (
    GetMessageHistoryQuery,
    GetMessageHistoryHandler,
)

__all__ = [
    "GetMessageHistoryQuery",
    "GetMessageHistoryHandler",
]
