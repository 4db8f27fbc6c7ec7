"""
Prisma Message Repository Implementation.

Prisma Message Model (from backend/prisma/schema.prisma):
    model Message {
        id           String   @id @default(uuid())
        sender_id    String
        recipient_id String
        text         String?
        image        String?
        video        String?
        created_at   DateTime @default(now())
    }

Mapping:
- Prisma: id (str) ←→ Domain: id (MessageId)
- Prisma: sender_id / recipient_id (str) ←→ Domain: UserId
- Prisma: image / video (str) ←→ Domain: media (MediaPayload of that kind)
"""

import logging
from prisma import Prisma
from prisma.errors import PrismaError
from prisma.models import Message as PrismaMessage
from chatline.domain.entities.message import Message, MessageDraft
from chatline.domain.exceptions import StoreUnavailableError
from chatline.domain.ports.repositories.message_repository import MessageRepository
from chatline.domain.value_objects.media_payload import MediaKind, MediaPayload
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class PrismaMessageRepository(MessageRepository):
    """
    Prisma implementation of MessageRepository.

    Handles persistence of Message entities to PostgreSQL via Prisma.
    """

    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        """
        Args:
            prisma: Connected Prisma client (injected by DI container)
        """
        self._prisma = prisma

    def _to_entity(self, record: PrismaMessage) -> Message:
        media = None
        if record.image:
            media = MediaPayload(kind=MediaKind.IMAGE, data=record.image)
        elif record.video:
            media = MediaPayload(kind=MediaKind.VIDEO, data=record.video)
        return Message(
            id=MessageId(record.id),
            sender_id=UserId(record.sender_id),
            recipient_id=UserId(record.recipient_id),
            created_at=record.created_at,
            text=record.text,
            media=media,
        )

    async def create(self, draft: MessageDraft) -> Message:
        """
        Insert one message. Prisma assigns ``id`` (uuid) and ``created_at``.

        Raises:
            StoreUnavailableError: If the database rejects or cannot take the write
        """
        media = draft.media
        try:
            record = await self._prisma.message.create(
                data={
                    "sender_id": draft.sender_id.value,
                    "recipient_id": draft.recipient_id.value,
                    "text": draft.text,
                    "image": media.data if media and media.kind is MediaKind.IMAGE else None,
                    "video": media.data if media and media.kind is MediaKind.VIDEO else None,
                }
            )
        except PrismaError as e:
            logger.error(f"[PrismaMessageRepository] create failed: {e}")
            raise StoreUnavailableError() from e
        return self._to_entity(record)

    async def get_between(
        self, user_a: UserId, user_b: UserId, limit: int
    ) -> list[Message]:
        """
        Latest ``limit`` messages of the pair, oldest first.

        Queries newest-first so ``take`` keeps the most recent, then reverses.
        """
        try:
            records = await self._prisma.message.find_many(
                where={
                    "OR": [
                        {"sender_id": user_a.value, "recipient_id": user_b.value},
                        {"sender_id": user_b.value, "recipient_id": user_a.value},
                    ]
                },
                order={"created_at": "desc"},
                take=limit,
            )
        except PrismaError as e:
            logger.error(f"[PrismaMessageRepository] get_between failed: {e}")
            raise StoreUnavailableError() from e
        records.reverse()  # Now oldest first
        return [self._to_entity(record) for record in records]
