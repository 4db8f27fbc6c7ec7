"""Message DTO shared by REST responses and realtime deliveries."""

from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel
from typing import Optional

from chatline.domain.entities.message import Message


class MessageDTO(BaseModel):
    """A persisted message as clients see it."""

    id: str
    sender_id: str
    recipient_id: str
    text: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, message: Message) -> MessageDTO:
        return cls(
            id=message.id.value,
            sender_id=message.sender_id.value,
            recipient_id=message.recipient_id.value,
            text=message.text,
            image=message.image,
            video=message.video,
            created_at=message.created_at,
        )
