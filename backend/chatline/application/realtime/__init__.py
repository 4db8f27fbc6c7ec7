"""
Realtime core - who is online and where deliveries go.

- registry.py  → ConnectionRegistry: user id → one live connection
- presence.py  → PresenceBroadcaster: pushes the full online set on change
- router.py    → MessageRouter: best-effort push of a persisted message
- sequencer.py → SenderSequencer: per-sender ordering of persist-then-route
- events.py    → RealtimeEvent envelope and its two event types
"""

from chatline.application.realtime.events import EventType, RealtimeEvent
from chatline.application.realtime.presence import PresenceBroadcaster
from chatline.application.realtime.registry import ConnectionRegistry
from chatline.application.realtime.router import MessageRouter, RoutingOutcome
from chatline.application.realtime.sequencer import SenderSequencer

__all__ = [
    "EventType",
    "RealtimeEvent",
    "PresenceBroadcaster",
    "ConnectionRegistry",
    "MessageRouter",
    "RoutingOutcome",
    "SenderSequencer",
]
