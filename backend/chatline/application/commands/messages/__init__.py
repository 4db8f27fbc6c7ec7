"""Message commands."""

from chatline.application.commands.messages.send_message import (
    SendMessageCommand,
    SendMessageHandler,
)

__all__ = [
    "SendMessageCommand",
    "SendMessageHandler",
]
