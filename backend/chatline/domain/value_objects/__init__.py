"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from chatline.domain.value_objects.user_id import UserId
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.media_payload import MediaKind, MediaPayload

__all__ = [
    "UserId",
    "MessageId",
    "MediaKind",
    "MediaPayload",
]
