"""
Message Entity - A direct message between two users.

A MessageDraft is what the sender asked for; the store turns it into a
Message by assigning ``id`` and ``created_at``.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from chatline.domain.exceptions.validation_error import DomainValidationError
from chatline.domain.value_objects.media_payload import MediaKind, MediaPayload
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId


def _check_content(text: Optional[str], media: Optional[MediaPayload]) -> None:
    if not text and media is None:
        raise DomainValidationError("Message must contain text or media.")


@dataclass(frozen=True)
class MessageDraft:
    sender_id: UserId
    recipient_id: UserId
    text: Optional[str] = None
    media: Optional[MediaPayload] = None

    def __post_init__(self):
        _check_content(self.text, self.media)


@dataclass(frozen=True)
class Message:
    id: MessageId
    sender_id: UserId
    recipient_id: UserId
    created_at: datetime
    text: Optional[str] = None
    media: Optional[MediaPayload] = None

    def __post_init__(self):
        _check_content(self.text, self.media)

    @classmethod
    def from_draft(
        cls, draft: MessageDraft, id: MessageId, created_at: datetime
    ) -> Message:
        return cls(
            id=id,
            sender_id=draft.sender_id,
            recipient_id=draft.recipient_id,
            created_at=created_at,
            text=draft.text,
            media=draft.media,
        )

    @property
    def image(self) -> Optional[str]:
        if self.media and self.media.kind is MediaKind.IMAGE:
            return self.media.data
        return None

    @property
    def video(self) -> Optional[str]:
        if self.media and self.media.kind is MediaKind.VIDEO:
            return self.media.data
        return None

    def involves(self, user_id: UserId, peer_id: UserId) -> bool:
        """True if the message was exchanged between the two given users."""
        return (self.sender_id, self.recipient_id) in (
            (user_id, peer_id),
            (peer_id, user_id),
        )
