"""
Event bus with explicit unsubscribe handles.

Every subscribe() returns a Subscription. Releasing it (cancel() or leaving
its ``with`` block) removes exactly that handler, so a scope that owns a
subscription can always undo it.
"""

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], None]


class Subscription:
    def __init__(self, bus: "EventBus", event_type: str, handler: Handler):
        self._bus = bus
        self.event_type = event_type
        self.handler = handler
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._bus._remove(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.cancel()


class EventBus:
    def __init__(self):
        self._subscriptions: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: Handler) -> Subscription:
        subscription = Subscription(self, event_type, handler)
        self._subscriptions[event_type].append(subscription)
        return subscription

    def subscriber_count(self, event_type: str) -> int:
        return len(self._subscriptions.get(event_type, ()))

    def publish(self, event: dict[str, Any]) -> int:
        """Call every handler for ``event['type']``. Returns how many ran."""
        delivered = 0
        for subscription in list(self._subscriptions.get(event.get("type"), ())):
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"[EventBus] Handler for {subscription.event_type} failed: {e}",
                    exc_info=True,
                )
        return delivered

    def _remove(self, subscription: Subscription) -> None:
        handlers = self._subscriptions.get(subscription.event_type)
        if handlers and subscription in handlers:
            handlers.remove(subscription)
            if not handlers:
                del self._subscriptions[subscription.event_type]
