"""
Presence Broadcaster.

Every announcement is a full snapshot of the online set, pushed to every
live connection (the users in the set included). Clients replace their
roster state with it; there are no deltas to reorder or lose.
"""

import logging
from typing import Iterable

from chatline.application.realtime.events import EventType, RealtimeEvent
from chatline.domain.ports.connection import ConnectionHandle
from chatline.observability.metrics import (
    increment_dropped_event,
    increment_presence_broadcasts,
)

logger = logging.getLogger(__name__)


class PresenceBroadcaster:
    def announce(
        self, online: frozenset[str], connections: Iterable[ConnectionHandle]
    ) -> int:
        """
        Push one presence snapshot to each connection without waiting on any.

        Returns:
            Number of connections that accepted the snapshot
        """
        wire = RealtimeEvent.presence_snapshot(online).to_wire()
        accepted = 0
        for handle in connections:
            try:
                ok = handle.push(wire)
            except Exception as e:
                logger.warning(f"[Presence] Push to {handle.user_id} failed: {e}")
                ok = False
            if ok:
                accepted += 1
            else:
                increment_dropped_event(EventType.PRESENCE_SNAPSHOT.value)
        increment_presence_broadcasts()
        logger.debug(f"[Presence] {len(online)} online, snapshot sent to {accepted}")
        return accepted
