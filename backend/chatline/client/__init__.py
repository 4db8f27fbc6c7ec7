"""
Python client for the chat service.

- api.py          → ChatApiClient: REST calls with tiered timeouts
- transport.py    → WebSocketTransport: the realtime event stream
- subscriptions.py→ EventBus / Subscription handles
- conversation.py → ConversationView: ordered, de-duplicated messages with one peer
- sync_agent.py   → SyncAgent: ties the above to one authenticated session
"""

from chatline.client.api import ChatApiClient
from chatline.client.conversation import ConversationView
from chatline.client.errors import (
    ChatClientError,
    ConnectionLostError,
    MediaFormatRejectedError,
    MediaTooLargeError,
    SendNetworkError,
    SendRejectedError,
    SendTimeoutError,
    describe_send_error,
)
from chatline.client.subscriptions import EventBus, Subscription
from chatline.client.sync_agent import AgentState, SyncAgent
from chatline.client.transport import WebSocketTransport

__all__ = [
    "ChatApiClient",
    "ConversationView",
    "ChatClientError",
    "ConnectionLostError",
    "MediaFormatRejectedError",
    "MediaTooLargeError",
    "SendNetworkError",
    "SendRejectedError",
    "SendTimeoutError",
    "describe_send_error",
    "EventBus",
    "Subscription",
    "AgentState",
    "SyncAgent",
    "WebSocketTransport",
]
