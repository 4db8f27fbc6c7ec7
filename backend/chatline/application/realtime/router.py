"""
Message Router - push a persisted message to its recipient, best-effort.

Runs only after the message is persisted, so a missed push never loses
data: the recipient finds the message in history on their next fetch.
No retries, no acknowledgements, no offline queue.
"""

import logging
from enum import Enum

from chatline.application.realtime.events import EventType, RealtimeEvent
from chatline.application.realtime.registry import ConnectionRegistry
from chatline.domain.entities.message import Message
from chatline.observability.metrics import (
    increment_dropped_event,
    increment_routing_outcome,
)

logger = logging.getLogger(__name__)


class RoutingOutcome(str, Enum):
    DELIVERED = "delivered"
    RECIPIENT_OFFLINE = "recipient_offline"


class MessageRouter:
    def __init__(self, registry: ConnectionRegistry):
        self._registry = registry

    def route(self, message: Message) -> RoutingOutcome:
        """Queue one message_delivery on the recipient's live connection, if any."""
        outcome = RoutingOutcome.RECIPIENT_OFFLINE
        handle = self._registry.lookup(message.recipient_id)
        if handle is not None:
            try:
                accepted = handle.push(
                    RealtimeEvent.message_delivery(message).to_wire()
                )
            except Exception as e:
                logger.warning(
                    f"[Router] Push of {message.id} to {message.recipient_id} failed: {e}"
                )
                accepted = False
            if accepted:
                outcome = RoutingOutcome.DELIVERED
            else:
                increment_dropped_event(EventType.MESSAGE_DELIVERY.value)

        if outcome is RoutingOutcome.RECIPIENT_OFFLINE:
            logger.debug(
                f"[Router] {message.recipient_id} unreachable, {message.id} left in history"
            )
        increment_routing_outcome(outcome.value)
        return outcome
