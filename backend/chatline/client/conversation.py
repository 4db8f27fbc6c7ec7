"""The client's view of one conversation."""

from typing import Iterable, Optional

from chatline.application.dto.message import MessageDTO


class ConversationView:
    """
    Messages exchanged with one peer, in arrival order, unique by id.

    During a history fetch, pushes are remembered; replace() keeps the ones
    the fetched history does not already contain.
    """

    def __init__(self, peer_id: Optional[str] = None):
        self.peer_id = peer_id
        self._messages: list[MessageDTO] = []
        self._ids: set[str] = set()
        self._arrived_during_fetch: Optional[list[MessageDTO]] = None

    @property
    def messages(self) -> list[MessageDTO]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, message_id: str) -> bool:
        return message_id in self._ids

    def begin_fetch(self) -> None:
        self._arrived_during_fetch = []

    def abort_fetch(self) -> None:
        self._arrived_during_fetch = None

    def merge(self, message: MessageDTO) -> bool:
        """Append unless already present. Returns True if appended."""
        if message.id in self._ids:
            return False
        self._messages.append(message)
        self._ids.add(message.id)
        if self._arrived_during_fetch is not None:
            self._arrived_during_fetch.append(message)
        return True

    def replace(self, history: Iterable[MessageDTO]) -> None:
        arrived = self._arrived_during_fetch or []
        self._arrived_during_fetch = None
        self._messages = []
        self._ids = set()
        for message in history:
            self.merge(message)
        for message in arrived:
            self.merge(message)
