"""
Message Repository Port - Interface for message persistence.
Implementations: chatline/infrastructure/persistence/
"""

from abc import ABC, abstractmethod
from chatline.domain.entities.message import Message, MessageDraft
from chatline.domain.value_objects.user_id import UserId


class MessageRepository(ABC):
    @abstractmethod
    async def create(self, draft: MessageDraft) -> Message:
        """Persist a draft; the store assigns ``id`` and ``created_at``."""
        ...

    @abstractmethod
    async def get_between(
        self, user_a: UserId, user_b: UserId, limit: int
    ) -> list[Message]:
        """Latest ``limit`` messages exchanged by the pair, oldest first."""
        ...
