"""
Connection Registry - the single source of truth for "who is online".

One live connection per user; the last registration wins. Every call to
``register`` or ``unregister`` notifies the change listener with the new
online set and the live connections (the presence broadcaster in production).

All mutations are plain synchronous dict operations with no await in
between, so each one is atomic on the event loop.
"""

import logging
from typing import Callable, Optional

from chatline.domain.ports.connection import ConnectionHandle
from chatline.domain.value_objects.user_id import UserId
from chatline.observability.metrics import set_online_users

logger = logging.getLogger(__name__)

ChangeListener = Callable[[frozenset[str], list[ConnectionHandle]], None]


class ConnectionRegistry:
    def __init__(self, on_change: Optional[ChangeListener] = None):
        self._connections: dict[str, ConnectionHandle] = {}
        self._on_change = on_change

    def register(self, user_id: UserId, handle: ConnectionHandle) -> None:
        """
        Bind ``handle`` as the user's live connection.

        A previous handle for the same user is replaced, not closed. It stops
        receiving deliveries and presence from this point on.
        """
        previous = self._connections.get(user_id.value)
        self._connections[user_id.value] = handle
        if previous is not None and previous is not handle:
            logger.info(f"[Registry] {user_id} reconnected, previous connection superseded")
        else:
            logger.info(f"[Registry] {user_id} online")
        self._changed()

    def unregister(self, user_id: UserId, handle: ConnectionHandle) -> None:
        """
        Remove the binding only if it still points at ``handle``.

        A late disconnect from a superseded connection leaves the newer
        binding in place.
        """
        if self._connections.get(user_id.value) is handle:
            del self._connections[user_id.value]
            logger.info(f"[Registry] {user_id} offline")
        else:
            logger.debug(f"[Registry] Stale disconnect for {user_id} ignored")
        self._changed()

    def is_online(self, user_id: UserId) -> bool:
        return user_id.value in self._connections

    def lookup(self, user_id: UserId) -> Optional[ConnectionHandle]:
        return self._connections.get(user_id.value)

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._connections)

    def connections(self) -> list[ConnectionHandle]:
        return list(self._connections.values())

    def _changed(self) -> None:
        online = self.snapshot()
        set_online_users(len(online))
        if self._on_change is None:
            return
        try:
            self._on_change(online, self.connections())
        except Exception as e:
            logger.error(f"[Registry] Change listener failed: {e}", exc_info=True)
