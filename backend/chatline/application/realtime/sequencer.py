"""Per-sender serialization of the persist-then-route section."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from chatline.domain.value_objects.user_id import UserId


class SenderSequencer:
    """
    Hands out one asyncio.Lock per sender.

    asyncio.Lock wakes waiters in FIFO order, so two sends from the same
    sender are persisted and routed in the order they arrived. Locks for
    senders with nobody waiting are discarded.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, sender_id: UserId) -> AsyncIterator[None]:
        key = sender_id.value
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    def active_senders(self) -> int:
        return len(self._locks)
