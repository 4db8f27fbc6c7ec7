"""
Connection Port - A live, authenticated client connection.

The realtime core only ever pushes to a handle. Pushing must not block the
caller: implementations queue the event and report whether it was accepted.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from chatline.domain.value_objects.user_id import UserId


class ConnectionHandle(ABC):
    user_id: UserId
    connected_at: datetime

    @abstractmethod
    def push(self, event: dict[str, Any]) -> bool:
        """Queue an outbound event. Returns False if it was dropped."""
        ...

    @abstractmethod
    async def close(self) -> None: ...
