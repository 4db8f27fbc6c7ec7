"""Server → client event envelope."""

from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, Field

from chatline.application.dto.message import MessageDTO
from chatline.domain.entities.message import Message


class EventType(str, Enum):
    PRESENCE_SNAPSHOT = "presence_snapshot"
    MESSAGE_DELIVERY = "message_delivery"


class RealtimeEvent(BaseModel):
    type: EventType
    data: dict[str, Any]
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def presence_snapshot(cls, online: Iterable[str]) -> RealtimeEvent:
        return cls(
            type=EventType.PRESENCE_SNAPSHOT, data={"user_ids": sorted(online)}
        )

    @classmethod
    def message_delivery(cls, message: Message) -> RealtimeEvent:
        return cls(
            type=EventType.MESSAGE_DELIVERY,
            data=MessageDTO.from_entity(message).model_dump(mode="json"),
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
