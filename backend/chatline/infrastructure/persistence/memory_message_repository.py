"""
In-memory Message Repository.

Single-process store for development and tests. Messages are kept in
persistence order, which is also the order history returns them in.
"""

import uuid
from datetime import datetime, timezone

from chatline.domain.entities.message import Message, MessageDraft
from chatline.domain.ports.repositories.message_repository import MessageRepository
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId


class InMemoryMessageRepository(MessageRepository):
    def __init__(self):
        self._messages: list[Message] = []

    async def create(self, draft: MessageDraft) -> Message:
        message = Message.from_draft(
            draft,
            id=MessageId(str(uuid.uuid4())),
            created_at=datetime.now(timezone.utc),
        )
        self._messages.append(message)
        return message

    async def get_between(
        self, user_a: UserId, user_b: UserId, limit: int
    ) -> list[Message]:
        pair = [m for m in self._messages if m.involves(user_a, user_b)]
        return pair[-limit:] if limit > 0 else []

    def __len__(self) -> int:
        return len(self._messages)
