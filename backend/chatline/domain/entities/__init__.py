"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Has behavior (methods)
- Pure Python dataclasses (no ORM, no Pydantic)
"""

from chatline.domain.entities.message import Message, MessageDraft
from chatline.domain.entities.user import User

__all__ = [
    "Message",
    "MessageDraft",
    "User",
]
